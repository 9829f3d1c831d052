"""Typed, immutable resolver configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ConfigurationError

# Longest presentation-form domain name.
MAX_SUFFIX_LENGTH = 253


class ResolverConfiguration(BaseModel):
    """Brief: Options read once when a resolver is built.

    Inputs:
      - suffix: Literal text appended to every canonical name and optionally
        accepted when decoding. Defaults to "".

    Outputs:
      - Frozen ResolverConfiguration instance.

    Raises:
      - ConfigurationError: when the suffix contains whitespace or control
        characters, or is longer than a domain name can be.

    Example:
      >>> ResolverConfiguration(suffix=".example.com").suffix
      '.example.com'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    suffix: str = Field(default="", max_length=MAX_SUFFIX_LENGTH)

    @field_validator("suffix")
    @classmethod
    def _check_suffix(cls, value: str) -> str:
        for ch in value:
            if ch.isspace() or not ch.isprintable():
                raise ValueError(
                    f"suffix must not contain whitespace or control characters: {value!r}"
                )
        return value

    def __init__(self, **data: object) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid resolver configuration: {exc}") from exc
