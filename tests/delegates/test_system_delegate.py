"""
Brief: Tests for echodns.delegates.system.SystemDelegate with socket faked out.

Inputs:
  - monkeypatch

Outputs:
  - None
"""

import socket

import pytest

from echodns.delegates import system as system_mod
from echodns.delegates.system import SystemDelegate
from echodns.errors import UnknownHostError
from echodns.resolver import NativeResolver


def _info(family, addr):
    sockaddr = (addr, 0) if family == socket.AF_INET else (addr, 0, 0, 0)
    return (family, socket.SOCK_STREAM, 6, "", sockaddr)


def test_lookup_all_deduplicates_and_keeps_order(monkeypatch):
    """
    Brief: getaddrinfo results are de-duplicated in resolver order.

    Inputs:
      - fake getaddrinfo returning duplicates

    Outputs:
      - None: Asserts addresses and requested family
    """
    seen = {}

    def fake_getaddrinfo(host, port, family=0, type=0, *a):
        seen["family"] = family
        return [
            _info(socket.AF_INET, "10.0.0.2"),
            _info(socket.AF_INET, "10.0.0.1"),
            _info(socket.AF_INET, "10.0.0.2"),
        ]

    monkeypatch.setattr(system_mod.socket, "getaddrinfo", fake_getaddrinfo)
    results = SystemDelegate().lookup_all("node")
    assert [str(r.address) for r in results] == ["10.0.0.2", "10.0.0.1"]
    assert all(r.hostname == "node" for r in results)
    assert seen["family"] == socket.AF_INET


def test_family_any_allows_ipv6_with_scope(monkeypatch):
    """
    Brief: family "any" asks for every family; scope ids are dropped.

    Inputs:
      - fake getaddrinfo returning a scoped IPv6 address

    Outputs:
      - None: Asserts AF_UNSPEC and parsed address
    """
    seen = {}

    def fake_getaddrinfo(host, port, family=0, type=0, *a):
        seen["family"] = family
        return [_info(socket.AF_INET6, "fe80::1%eth0")]

    monkeypatch.setattr(system_mod.socket, "getaddrinfo", fake_getaddrinfo)
    results = SystemDelegate(family="any").lookup_all("node")
    assert str(results[0].address) == "fe80::1"
    assert seen["family"] == socket.AF_UNSPEC


@pytest.mark.parametrize(
    "exc", [socket.gaierror(socket.EAI_NONAME, "Name or service not known"), UnicodeError("label too long")]
)
def test_resolution_failures_become_unknown_host(monkeypatch, exc):
    """
    Brief: gaierror and IDNA failures map to UnknownHostError.

    Inputs:
      - exc: exception raised by getaddrinfo

    Outputs:
      - None: Asserts UnknownHostError chained to exc
    """

    def fake_getaddrinfo(*a, **kw):
        raise exc

    monkeypatch.setattr(system_mod.socket, "getaddrinfo", fake_getaddrinfo)
    with pytest.raises(UnknownHostError) as info:
        SystemDelegate().lookup_all("nowhere")
    assert info.value.__cause__ is exc


def test_empty_answer_is_unknown_host(monkeypatch):
    """
    Brief: An empty getaddrinfo result is treated as unknown.

    Inputs:
      - fake getaddrinfo returning []

    Outputs:
      - None: Asserts UnknownHostError
    """
    monkeypatch.setattr(system_mod.socket, "getaddrinfo", lambda *a, **kw: [])
    with pytest.raises(UnknownHostError):
        SystemDelegate().lookup_all("nowhere")


def test_local_host_name_and_protocol(monkeypatch):
    """
    Brief: SystemDelegate reports gethostname() and satisfies NativeResolver.

    Inputs:
      - fake gethostname

    Outputs:
      - None: Asserts name and protocol conformance
    """
    monkeypatch.setattr(system_mod.socket, "gethostname", lambda: "node42")
    d = SystemDelegate()
    assert d.local_host_name() == "node42"
    assert isinstance(d, NativeResolver)
