"""Exception types raised by echodns."""

from __future__ import annotations


class EchoDnsError(Exception):
    """Base class for all echodns errors."""


class UnknownHostError(EchoDnsError):
    """Brief: A name could not be resolved by any available path.

    Inputs:
      - name: The query name that failed.
      - detail: Optional human-readable detail appended to the message.

    Outputs:
      - UnknownHostError instance exposing ``name`` and ``detail``.

    Notes:
      - This is an expected, recoverable outcome. Callers typically try
        another resolution path when they see it.
    """

    def __init__(self, name: str, detail: str | None = None) -> None:
        self.name = name
        self.detail = detail
        message = f"unknown host {name}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ConfigurationError(EchoDnsError, ValueError):
    """Invalid configuration detected while building a resolver at startup."""
