"""
Brief: Global pytest configuration: src/ on sys.path, per-test timeout and
shared fakes for the resolver's collaborators.

Inputs:
  - None

Outputs:
  - None
"""

import ipaddress
import logging
import os
import signal
import sys

import pytest

# Ensure 'src' is on sys.path so the 'echodns' package is importable in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_DIR = os.path.join(ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from echodns.errors import UnknownHostError  # noqa: E402
from echodns.resolver import HostAddress  # noqa: E402


def _alarm_handler(signum, frame):
    """
    Brief: Signal handler that raises TimeoutError when alarm triggers.

    Inputs:
      - signum: signal number (int)
      - frame: current frame (ignored)

    Outputs:
      - None: Raises TimeoutError to fail the test
    """
    raise TimeoutError("Test exceeded 10 seconds")


if hasattr(signal, "SIGALRM"):
    signal.signal(signal.SIGALRM, _alarm_handler)


@pytest.fixture(autouse=True)
def enforce_test_timeout():
    """
    Brief: Enforce a hard 10-second timeout for each test.

    Inputs:
      - None

    Outputs:
      - None: Cancels alarm after test
    """
    if hasattr(signal, "SIGALRM"):
        signal.alarm(10)
        try:
            yield
        finally:
            signal.alarm(0)
    else:
        yield


@pytest.fixture(autouse=True)
def clear_suffix_env(monkeypatch):
    """Keep a developer's ECHODNS_SUFFIX from leaking into tests."""
    monkeypatch.delenv("ECHODNS_SUFFIX", raising=False)
    yield


class FakeLookup:
    """
    Brief: Scripted lookup_all() collaborator recording every call.

    Inputs:
      - answers: mapping of name -> list of address strings; names missing
        from the mapping raise UnknownHostError.
      - hostname: value returned by local_host_name().

    Outputs:
      - Object usable as a native resolver or a delegate.
    """

    def __init__(self, answers=None, hostname="buildhost", label="fake"):
        self.answers = dict(answers or {})
        self.hostname = hostname
        self.label = label
        self.calls = []

    def __repr__(self):
        return f"<FakeLookup {self.label}>"

    def local_host_name(self):
        return self.hostname

    def lookup_all(self, name):
        self.calls.append(name)
        if name not in self.answers:
            raise UnknownHostError(name, f"not known to {self.label}")
        return [HostAddress(name, ipaddress.ip_address(a)) for a in self.answers[name]]


@pytest.fixture
def fake_lookup():
    """Factory fixture returning FakeLookup instances."""
    return FakeLookup


@pytest.fixture(autouse=True)
def restore_root_logger():
    """
    Brief: Undo init_logging() side effects (handlers, level) after each test.

    Inputs:
      - None

    Outputs:
      - None
    """
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
