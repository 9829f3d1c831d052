from __future__ import annotations

import logging
from typing import ClassVar, List, Optional, Sequence

from ..errors import UnknownHostError
from ..resolver import HostAddress

logger = logging.getLogger(__name__)


class BaseDelegate:
    """Brief: Base class for resolvers consulted after canonical decoding fails.

    Inputs:
      - name: Optional human-friendly identifier used in log messages. When
        omitted, the first alias (or the class name) is used.
      - **config: Delegate configuration. Subclasses may expose a pydantic
        model via get_config_model() so the loader validates it first. The
        optional ``abort_on_failure`` flag (default True) controls whether a
        failing setup() aborts startup.

    Outputs:
      - Initialized delegate; subclasses implement lookup_all().

    Example use:
        >>> from echodns.delegates.base import BaseDelegate
        >>> class Nothing(BaseDelegate):
        ...     def lookup_all(self, name):
        ...         raise UnknownHostError(name)
        >>> Nothing(name="empty").name
        'empty'
    """

    aliases: ClassVar[Sequence[str]] = ()

    @classmethod
    def get_aliases(cls) -> Sequence[str]:
        return tuple(getattr(cls, "aliases", ()))

    @classmethod
    def get_config_model(cls):
        """Return a pydantic model class validating this delegate's config, or None."""

        return None

    def __init__(self, name: Optional[str] = None, **config: object) -> None:
        if name is not None:
            self.name = str(name)
        else:
            aliases = list(self.get_aliases())
            self.name = str(aliases[0]) if aliases else self.__class__.__name__
        self.config = config
        self.logger = logging.getLogger(getattr(self.__class__, "__module__", __name__))
        logger.debug("loading %s", self)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"

    def setup(self) -> None:
        """Brief: One-time startup hook; runs before the first lookup.

        Inputs:
          - None.

        Outputs:
          - None. Raising aborts startup unless abort_on_failure is False.
        """

    def lookup_all(self, name: str) -> List[HostAddress]:
        """Resolve name to addresses or raise UnknownHostError."""

        raise NotImplementedError


def delegate_aliases(*aliases: str):
    """Brief: Decorator to set aliases on a delegate class for registry discovery.

    Inputs:
      - *aliases: Variable number of alias strings for the delegate.

    Outputs:
      - Callable that applies the aliases to a delegate class and returns it.

    Example:
        >>> @delegate_aliases("static", "fixed")
        ... class Static(BaseDelegate):
        ...     pass
        >>> Static.aliases
        ('static', 'fixed')
    """

    def _wrap(cls: type) -> type:
        cls.aliases = tuple(aliases)
        return cls

    return _wrap


__all__ = ["BaseDelegate", "UnknownHostError", "delegate_aliases"]
