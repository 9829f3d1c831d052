"""Forward and reverse resolution built on the canonical-name codec.

Brief:
  EchoResolver routes a forward query to one of three paths, in order:

    1. the native (platform) resolver, only for the local host name or
       ``localhost``; IPv4 answers get their host name rewritten to the
       canonical form;
    2. canonical decoding of names like ``a10-0-0-1[suffix]``;
    3. the delegate chain, first success wins.

  Reverse queries never leave the codec.

Inputs:
  - ResolverConfiguration, an optional native resolver and a sequence of
    delegates, all fixed at construction.

Outputs:
  - Lists of HostAddress for forward queries, canonical names (or None) for
    reverse queries. Failures surface as UnknownHostError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from .codec import AddressLike, Codec, IPAddress, as_ip_address
from .config.config_model import ResolverConfiguration
from .errors import UnknownHostError

logger = logging.getLogger(__name__)

LOCALHOST = "localhost"


@dataclass(frozen=True)
class HostAddress:
    """Brief: A resolved address paired with the host name attached to it.

    Inputs (constructor fields):
      - hostname: Host name reported for the address.
      - address: ipaddress.IPv4Address or IPv6Address.

    Example:
      >>> import ipaddress
      >>> HostAddress("a1-1-1-1", ipaddress.ip_address("1.1.1.1")).address.version
      4
    """

    hostname: str
    address: IPAddress

    def __str__(self) -> str:
        return f"{self.hostname}/{self.address}"


@runtime_checkable
class LookupAll(Protocol):
    """Anything that resolves a name to addresses or raises UnknownHostError."""

    def lookup_all(self, name: str) -> List[HostAddress]: ...


@runtime_checkable
class NativeResolver(LookupAll, Protocol):
    """The platform resolver, which also knows the local host name."""

    def local_host_name(self) -> str: ...


def _non_empty(resolved: List[HostAddress], name: str) -> List[HostAddress]:
    # An empty answer is a miss, not a success.
    if not resolved:
        raise UnknownHostError(name, "no addresses")
    return list(resolved)


class EchoResolver:
    """Brief: Resolve canonical names locally and everything else via fallbacks.

    Inputs:
      - config: ResolverConfiguration (suffix).
      - native: Optional NativeResolver consulted for the local host name.
      - delegates: Ordered fallback resolvers exposing lookup_all().

    Outputs:
      - EchoResolver instance; read-only after construction and safe to share
        between threads.

    Example:
      >>> r = EchoResolver(ResolverConfiguration(suffix=".example.com"))
      >>> [str(h) for h in r.resolve_forward("a1-1-1-1")]
      ['a1-1-1-1.example.com/1.1.1.1']
      >>> r.resolve_reverse("10.0.0.1")
      'a10-0-0-1.example.com'
    """

    def __init__(
        self,
        config: Optional[ResolverConfiguration] = None,
        native: Optional[NativeResolver] = None,
        delegates: Sequence[LookupAll] = (),
    ) -> None:
        self.config = config or ResolverConfiguration()
        self.codec = Codec(self.config.suffix)
        self.native = native
        self._delegates: Tuple[LookupAll, ...] = tuple(delegates)
        # Read once; the local host name does not change while we run.
        self._local_host_name: Optional[str] = (
            native.local_host_name() if native is not None else None
        )
        logger.debug(
            "EchoResolver ready (suffix=%r, local_host_name=%r, delegates=%d)",
            self.config.suffix,
            self._local_host_name,
            len(self._delegates),
        )

    @property
    def delegates(self) -> Tuple[LookupAll, ...]:
        return self._delegates

    @property
    def local_host_name(self) -> Optional[str]:
        return self._local_host_name

    def _is_local(self, name: str) -> bool:
        return name == LOCALHOST or (
            self._local_host_name is not None and name == self._local_host_name
        )

    def _resolve_native(self, native: NativeResolver, name: str) -> List[HostAddress]:
        resolved: List[HostAddress] = []
        for entry in _non_empty(native.lookup_all(name), name):
            canonical = self.codec.encode(entry.address)
            resolved.append(
                HostAddress(canonical if canonical is not None else name, entry.address)
            )
        return resolved

    def resolve_forward(self, name: str) -> List[HostAddress]:
        """Brief: Resolve a host name to one or more addresses.

        Inputs:
          - name: Query name.

        Outputs:
          - Non-empty list of HostAddress.

        Raises:
          - UnknownHostError: when the name is neither local, canonical nor
            resolvable by any delegate. Its __cause__ is the last failure seen.
          - Any other exception raised by the native resolver or a delegate is
            propagated unchanged.
        """

        failure: UnknownHostError = UnknownHostError(name, "not a canonical name")

        if self.native is not None and self._is_local(name):
            try:
                resolved = self._resolve_native(self.native, name)
            except UnknownHostError as exc:
                logger.debug("Native resolution of %s failed: %s", name, exc)
                failure = exc
            else:
                logger.debug("Resolved %s natively: %s", name, resolved)
                return resolved
        else:
            address = self.codec.decode(name)
            if address is not None:
                logger.debug("Decoded canonical name %s -> %s", name, address)
                return [HostAddress(self.codec.encode(address) or name, address)]

        for delegate in self._delegates:
            try:
                resolved = _non_empty(delegate.lookup_all(name), name)
            except UnknownHostError as exc:
                logger.debug("Delegate %r could not resolve %s: %s", delegate, name, exc)
                failure = exc
                continue
            logger.debug("Delegate %r resolved %s: %s", delegate, name, resolved)
            return resolved

        raise UnknownHostError(name, failure.detail) from failure

    def resolve_reverse(self, addr: AddressLike) -> Optional[str]:
        """Brief: Return the canonical name for an address.

        Inputs:
          - addr: Address-like value.

        Outputs:
          - str canonical name for IPv4; None (not applicable) otherwise.
        """

        return self.codec.encode(as_ip_address(addr))
