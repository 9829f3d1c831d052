from __future__ import annotations

import ipaddress
import logging
import os
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .base import BaseDelegate, delegate_aliases
from ..codec import IPAddress
from ..errors import UnknownHostError
from ..resolver import HostAddress

logger = logging.getLogger(__name__)


class HostsConfig(BaseModel):
    """Brief: Typed configuration model for HostsDelegate.

    Inputs:
      - hosts: Inline mapping of host name to one address or a list of them.
      - file_paths: Hosts-format files to load, in order.

    Outputs:
      - HostsConfig instance with normalized field types.
    """

    hosts: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)
    file_paths: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


@delegate_aliases("hosts", "etc_hosts", "hostfile")
class HostsDelegate(BaseDelegate):
    """
    Brief: Answer from a static table built from hosts files and inline entries.

    Files are read first, in order, then inline ``hosts`` entries. A name seen
    again later replaces the earlier addresses. Names are matched
    case-insensitively and a trailing dot is ignored.

    Example use:
        >>> d = HostsDelegate(hosts={"db": "10.0.0.5"})
        >>> d.setup()
        >>> [str(h.address) for h in d.lookup_all("DB.")]
        ['10.0.0.5']
    """

    @classmethod
    def get_config_model(cls):
        return HostsConfig

    @staticmethod
    def _key(name: str) -> str:
        return name.strip().rstrip(".").lower()

    def setup(self) -> None:
        table: Dict[str, List[IPAddress]] = {}

        for path in self.config.get("file_paths") or []:
            self._load_file(os.path.expanduser(str(path)), table)

        for name, raw in (self.config.get("hosts") or {}).items():
            values = raw if isinstance(raw, list) else [raw]
            table[self._key(name)] = [ipaddress.ip_address(str(v)) for v in values]

        self.hosts = table
        self.logger.info("Hosts delegate %s loaded %d names", self.name, len(table))

    def _load_file(self, path: str, table: Dict[str, List[IPAddress]]) -> None:
        file_table: Dict[str, List[IPAddress]] = {}
        with open(path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.split("#", 1)[0].strip()
                if not line:
                    continue
                fields = line.split()
                if len(fields) < 2:
                    self.logger.warning("%s:%d: no host names for %s", path, lineno, fields[0])
                    continue
                try:
                    addr = ipaddress.ip_address(fields[0].split("%", 1)[0])
                except ValueError:
                    self.logger.warning("%s:%d: invalid address %r", path, lineno, fields[0])
                    continue
                for name in fields[1:]:
                    addrs = file_table.setdefault(self._key(name), [])
                    if addr not in addrs:
                        addrs.append(addr)
        # Entries from this file replace those of earlier files.
        table.update(file_table)

    def lookup_all(self, name: str) -> List[HostAddress]:
        if not hasattr(self, "hosts"):
            self.setup()
        addrs: Optional[List[IPAddress]] = self.hosts.get(self._key(name))
        if not addrs:
            raise UnknownHostError(name, f"not in {self.name}")
        return [HostAddress(name, a) for a in addrs]
