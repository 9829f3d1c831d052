"""Bidirectional mapping between IPv4 addresses and canonical host names.

Brief:
  Every IPv4 address has exactly one canonical name of the form
  ``a<o1>-<o2>-<o3>-<o4>[suffix]`` (1.1.1.1 -> ``a1-1-1-1``). The configured
  suffix is appended verbatim when encoding and is optional when decoding,
  so both ``a1-1-1-1`` and ``a1-1-1-1.example.com`` decode to 1.1.1.1 when
  the suffix is ``.example.com``.

Inputs:
  - Addresses as ipaddress objects, packed bytes, integers or strings.
  - Names as plain strings.

Outputs:
  - Canonical names (str) or IPv4Address values; ``None`` where no answer
    applies (non-IPv4 encode, non-canonical decode).
"""

from __future__ import annotations

import functools
import ipaddress
import re
from dataclasses import dataclass
from typing import Optional, Pattern, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
AddressLike = Union[IPAddress, bytes, bytearray, int, str]

PREFIX = "a"
SEPARATOR = "-"


def as_ip_address(value: AddressLike) -> IPAddress:
    """Brief: Coerce an address-like value into an ipaddress object.

    Inputs:
      - value: IPv4Address/IPv6Address, 4- or 16-byte packed address, int,
        or textual address.

    Outputs:
      - IPv4Address or IPv6Address.

    Raises:
      - ValueError: when value does not describe an IP address.

    Example:
      >>> as_ip_address(b"\\x01\\x02\\x03\\x04")
      IPv4Address('1.2.3.4')
    """

    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return value
    if isinstance(value, (bytes, bytearray)):
        if len(value) not in (4, 16):
            raise ValueError(
                f"packed address must be 4 or 16 bytes long, got {len(value)}"
            )
        return ipaddress.ip_address(bytes(value))
    if isinstance(value, str):
        return ipaddress.ip_address(value.strip())
    return ipaddress.ip_address(value)


@functools.lru_cache(maxsize=64)
def canonical_pattern(suffix: str = "") -> Pattern[str]:
    """Brief: Compile the canonical-name pattern for a suffix.

    Inputs:
      - suffix: Literal suffix; regex metacharacters are escaped.

    Outputs:
      - Compiled pattern meant for ``fullmatch``. Groups 1-4 capture the
        octet digits.

    Notes:
      - The last octet is matched lazily so a suffix that starts with digits
        is still preferred over absorbing those digits into the octet.
    """

    return re.compile(
        PREFIX
        + r"([0-9]+)-([0-9]+)-([0-9]+)-([0-9]+?)"
        + "(?:"
        + re.escape(suffix)
        + ")?"
    )


def _parse_octet(text: str) -> Optional[int]:
    # Only the natural decimal spelling is canonical: 0-255, no leading zeros.
    if len(text) > 3 or (len(text) > 1 and text[0] == "0"):
        return None
    value = int(text)
    if value > 255:
        return None
    return value


def encode(addr: AddressLike, suffix: str = "") -> Optional[str]:
    """Brief: Encode an address as its canonical host name.

    Inputs:
      - addr: Address-like value (see as_ip_address).
      - suffix: Literal suffix appended to the name.

    Outputs:
      - str canonical name for IPv4 addresses; None for any other family.

    Example:
      >>> encode("2.3.4.5", ".example.com")
      'a2-3-4-5.example.com'
      >>> encode("::1") is None
      True
    """

    ip = as_ip_address(addr)
    if ip.version != 4:
        return None
    return PREFIX + str(ip).replace(".", SEPARATOR) + suffix


def decode(name: str, suffix: str = "") -> Optional[ipaddress.IPv4Address]:
    """Brief: Decode a canonical host name back to its IPv4 address.

    Inputs:
      - name: Candidate host name.
      - suffix: Literal suffix that may (or may not) terminate the name.

    Outputs:
      - IPv4Address when name is canonical; None otherwise.

    Notes:
      - Octets above 255 or written with leading zeros are not canonical and
        yield None, so encode(decode(name)) == name whenever decode succeeds
        on a name that carries the suffix.

    Example:
      >>> decode("a1-1-1-1.example.com", ".example.com")
      IPv4Address('1.1.1.1')
      >>> decode("example.com") is None
      True
    """

    if not isinstance(name, str):
        return None
    match = canonical_pattern(suffix).fullmatch(name)
    if match is None:
        return None
    octets = [_parse_octet(group) for group in match.groups()]
    if any(o is None for o in octets):
        return None
    return ipaddress.IPv4Address(bytes(octets))


@dataclass(frozen=True)
class Codec:
    """Suffix-bound encoder/decoder.

    Example:
      >>> Codec(".example.com").encode("1.1.1.1")
      'a1-1-1-1.example.com'
    """

    suffix: str = ""

    def encode(self, addr: AddressLike) -> Optional[str]:
        return encode(addr, self.suffix)

    def decode(self, name: str) -> Optional[ipaddress.IPv4Address]:
        return decode(name, self.suffix)

    def is_canonical(self, name: str) -> bool:
        return self.decode(name) is not None
