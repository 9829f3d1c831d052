from __future__ import annotations

import ipaddress
import logging
from typing import List, Optional

import dns.exception
import dns.name
import dns.resolver
from pydantic import BaseModel, ConfigDict, Field

from .base import BaseDelegate, delegate_aliases
from ..errors import UnknownHostError
from ..resolver import HostAddress

logger = logging.getLogger(__name__)

# Outcomes that mean "this delegate has no answer"; anything else is a bug.
_NOT_FOUND = (
    dns.resolver.NXDOMAIN,
    dns.resolver.NoAnswer,
    dns.resolver.NoNameservers,
    dns.resolver.YXDOMAIN,
    dns.exception.Timeout,
    dns.name.EmptyLabel,
    dns.name.LabelTooLong,
    dns.name.NameTooLong,
)


class DnsPythonConfig(BaseModel):
    """Brief: Typed configuration model for DnsPythonDelegate.

    Inputs:
      - nameservers: Optional list of nameserver IPs; defaults to the system
        configuration (/etc/resolv.conf).
      - port: Nameserver port.
      - timeout: Per-server timeout in seconds.
      - lifetime: Total time budget for one lookup in seconds.
      - search: Apply the configured search list to relative names.

    Outputs:
      - DnsPythonConfig instance with normalized field types.
    """

    nameservers: Optional[List[str]] = None
    port: int = Field(default=53, ge=1, le=65535)
    timeout: float = Field(default=2.0, gt=0)
    lifetime: float = Field(default=5.0, gt=0)
    search: bool = False

    model_config = ConfigDict(extra="allow")


@delegate_aliases("dnspython", "dns")
class DnsPythonDelegate(BaseDelegate):
    """
    Brief: Resolve A records with dnspython's stub resolver.

    Example use:
        In config.yaml:
        delegates:
          - module: dnspython
            config:
              nameservers: [10.0.0.2]
              timeout: 1.5
    """

    @classmethod
    def get_config_model(cls):
        return DnsPythonConfig

    def setup(self) -> None:
        nameservers = self.config.get("nameservers")
        # configure=False avoids reading resolv.conf when servers are explicit.
        self.resolver = dns.resolver.Resolver(configure=not nameservers)
        if nameservers:
            self.resolver.nameservers = [str(ns) for ns in nameservers]
        self.resolver.port = int(self.config.get("port", 53))
        self.resolver.timeout = float(self.config.get("timeout", 2.0))
        self.resolver.lifetime = float(self.config.get("lifetime", 5.0))
        self.search = bool(self.config.get("search", False))
        self.logger.debug(
            "dnspython delegate %s using nameservers %s",
            self.name,
            self.resolver.nameservers,
        )

    def lookup_all(self, name: str) -> List[HostAddress]:
        if not hasattr(self, "resolver"):
            self.setup()
        try:
            answer = self.resolver.resolve(name, "A", search=self.search)
        except _NOT_FOUND as exc:
            raise UnknownHostError(name, str(exc)) from exc
        return [HostAddress(name, ipaddress.ip_address(rr.address)) for rr in answer]
