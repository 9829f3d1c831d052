"""Alias table for the delegates echodns ships, plus dotted-path loading.

Brief:
  The built-in delegates are listed explicitly in BUILTIN_DELEGATES. Config
  entries name one of their aliases, or give a dotted "pkg.mod.Class" path
  for a delegate that lives outside this package.
"""

from __future__ import annotations

import difflib
import importlib
import inspect
from typing import Dict, Iterable, Optional, Tuple, Type

from .base import BaseDelegate
from .dnspython import DnsPythonDelegate
from .hosts import HostsDelegate
from .system import SystemDelegate

BUILTIN_DELEGATES: Tuple[Type[BaseDelegate], ...] = (
    SystemDelegate,
    HostsDelegate,
    DnsPythonDelegate,
)


def normalize_alias(alias: str) -> str:
    return alias.strip().lower().replace("-", "_")


def alias_table(
    classes: Iterable[Type[BaseDelegate]] = BUILTIN_DELEGATES,
) -> Dict[str, Type[BaseDelegate]]:
    """Brief: Map every alias of the given delegate classes to its class.

    Inputs:
      - classes: Delegate classes, each carrying aliases from @delegate_aliases.

    Outputs:
      - dict: normalized alias -> class.

    Raises:
      - ValueError: when two classes claim the same alias, or a class has none.

    Example:
      >>> alias_table()["etc_hosts"].__name__
      'HostsDelegate'
    """

    table: Dict[str, Type[BaseDelegate]] = {}
    for cls in classes:
        aliases = [normalize_alias(a) for a in cls.get_aliases()]
        if not aliases:
            raise ValueError(f"Delegate {cls.__name__} declares no aliases")
        for alias in aliases:
            owner = table.setdefault(alias, cls)
            if owner is not cls:
                raise ValueError(
                    f"Delegate alias '{alias}' claimed by both "
                    f"{owner.__name__} and {cls.__name__}"
                )
    return table


def _import_delegate(path: str) -> Type[BaseDelegate]:
    modname, _, classname = path.rpartition(".")
    if not modname or not classname:
        raise ValueError(f"Invalid delegate path '{path}'")
    cls = getattr(importlib.import_module(modname), classname)
    if not (inspect.isclass(cls) and issubclass(cls, BaseDelegate)):
        raise TypeError(f"{path} is not a BaseDelegate subclass")
    return cls


def get_delegate_class(
    identifier: str, table: Optional[Dict[str, Type[BaseDelegate]]] = None
) -> Type[BaseDelegate]:
    """Brief: Resolve a config identifier to a delegate class.

    Inputs:
      - identifier: Alias ("hosts", "Etc-Hosts") or dotted class path.
      - table: Alias table to search; defaults to the built-in delegates.

    Outputs:
      - BaseDelegate subclass.

    Raises:
      - KeyError: unknown alias (message lists close matches).
      - ValueError / TypeError / ImportError / AttributeError: bad dotted path.
    """

    ident = identifier.strip()
    if "." in ident:
        return _import_delegate(ident)

    aliases = alias_table() if table is None else table
    key = normalize_alias(ident)
    if key in aliases:
        return aliases[key]
    suggestions = difflib.get_close_matches(key, list(aliases), n=3)
    raise KeyError(
        f"Unknown delegate alias '{identifier}'. "
        f"Known aliases: {', '.join(sorted(aliases))}. "
        f"Suggestions: {suggestions}"
    )
