from __future__ import annotations

import ipaddress
import logging
import socket
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

from .base import BaseDelegate, delegate_aliases
from ..errors import UnknownHostError
from ..resolver import HostAddress

logger = logging.getLogger(__name__)

_FAMILIES = {
    "ipv4": socket.AF_INET,
    "any": socket.AF_UNSPEC,
}


class SystemConfig(BaseModel):
    """Brief: Typed configuration model for SystemDelegate.

    Inputs:
      - family: "ipv4" (default) to request only IPv4 answers, or "any".

    Outputs:
      - SystemConfig instance.
    """

    family: Literal["ipv4", "any"] = Field(default="ipv4")

    model_config = ConfigDict(extra="allow")


@delegate_aliases("system", "native", "os")
class SystemDelegate(BaseDelegate):
    """
    Brief: Resolve names through the platform resolver (getaddrinfo).

    Doubles as the native resolver handed to EchoResolver: besides
    lookup_all() it reports the local host name.

    Example use:
        In config.yaml:
        delegates:
          - module: system
            config:
              family: any
    """

    @classmethod
    def get_config_model(cls):
        return SystemConfig

    def local_host_name(self) -> str:
        return socket.gethostname()

    def lookup_all(self, name: str) -> List[HostAddress]:
        """
        Resolve name with socket.getaddrinfo().

        Args:
            name: Host name to resolve.
        Returns:
            Unique addresses in resolver order, each tagged with name.
        Raises:
            UnknownHostError: when getaddrinfo fails or returns nothing.
        """
        family = _FAMILIES[str(self.config.get("family", "ipv4"))]
        try:
            infos = socket.getaddrinfo(name, None, family, socket.SOCK_STREAM)
        except (socket.gaierror, UnicodeError) as exc:
            raise UnknownHostError(name, str(exc)) from exc

        seen: List[HostAddress] = []
        for _family, _type, _proto, _canon, sockaddr in infos:
            # IPv6 sockaddrs may carry a scope id ("fe80::1%eth0").
            text = str(sockaddr[0]).split("%", 1)[0]
            entry = HostAddress(name, ipaddress.ip_address(text))
            if entry not in seen:
                seen.append(entry)
        if not seen:
            raise UnknownHostError(name, "no addresses returned")
        self.logger.debug("getaddrinfo(%s) -> %s", name, [str(e.address) for e in seen])
        return seen
