"""
Delegate resolvers consulted when a name is not canonical.

Brief: Each module defines one or more BaseDelegate subclasses; the registry
maps their aliases (e.g. "system", "hosts", "dnspython") to classes so the
configuration can refer to them by name.
"""

from .base import BaseDelegate, delegate_aliases

__all__ = ["BaseDelegate", "delegate_aliases"]
