"""JSON Schema-based validation for echodns YAML configuration.

Brief:
  The schema below describes the whole configuration document. Validation
  runs with jsonschema's Draft 2020-12 validator after a normalization pass
  that strips meta fields the schema does not describe.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator, ValidationError

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

_LEVEL_ENUM = ["debug", "info", "warn", "warning", "error", "crit", "critical"]

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "echodns configuration",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "echodns": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "suffix": {"type": "string", "maxLength": 253},
                "native": {"type": "boolean"},
            },
        },
        "delegates": {
            "type": "array",
            "items": {
                "oneOf": [
                    {"type": "string", "minLength": 1},
                    {
                        "type": "object",
                        "additionalProperties": False,
                        "required": ["module"],
                        "properties": {
                            "module": {"type": "string", "minLength": 1},
                            "name": {"type": "string"},
                            "config": {"type": "object"},
                        },
                    },
                ]
            },
        },
        "logging": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "level": {"type": "string", "enum": _LEVEL_ENUM},
                "stderr": {"type": "boolean"},
                "file": {"type": "string"},
                "syslog": {
                    "oneOf": [
                        {"type": "boolean"},
                        {
                            "type": "object",
                            "additionalProperties": False,
                            "properties": {
                                "address": {
                                    "oneOf": [
                                        {"type": "string"},
                                        {
                                            "type": "array",
                                            "prefixItems": [
                                                {"type": "string"},
                                                {"type": "integer"},
                                            ],
                                            "minItems": 2,
                                            "maxItems": 2,
                                        },
                                    ]
                                },
                                "facility": {"type": "string"},
                                "tag": {"type": "string"},
                            },
                        },
                    ]
                },
            },
        },
    },
}


def _normalize_delegate_entries_for_validation(cfg: Dict[str, Any]) -> None:
    """Brief: Strip delegate meta fields and drop disabled entries.

    Inputs:
      - cfg: Parsed YAML configuration mapping (mutated in-place).

    Outputs:
      - None.

    Supported meta fields:
      - enabled: When false (at entry level or in entry.config), the entry is
        removed.
      - comment: Optional human-only string; removed.
    """

    delegates = cfg.get("delegates")
    if not isinstance(delegates, list):
        return

    normalized: List[Any] = []
    for entry in delegates:
        if not isinstance(entry, dict):
            normalized.append(entry)
            continue

        enabled_obj: Any = entry.pop("enabled", None)
        entry.pop("comment", None)
        config_obj = entry.get("config")
        if isinstance(config_obj, dict):
            if "enabled" in config_obj:
                enabled_obj = config_obj.pop("enabled")
            config_obj.pop("comment", None)

        if enabled_obj is not None and not bool(enabled_obj):
            continue
        normalized.append(entry)

    cfg["delegates"] = normalized


def _format_errors(errors: List[ValidationError], *, config_path: Optional[str]) -> str:
    """Brief: Format jsonschema validation errors into a human-readable string.

    Inputs:
      - errors: List of jsonschema.ValidationError instances.
      - config_path: Optional path to the YAML config being validated.

    Outputs:
      - String suitable for display in logs or CLI output.
    """

    lines: List[str] = [f"Invalid configuration in {config_path or '<config dict>'}:"]
    for err in errors:
        instance_path = "/".join(str(p) for p in err.path) or "<root>"
        schema_path = "/".join(str(p) for p in err.schema_path)
        lines.append(f"- {instance_path}: {err.message} (schema: {schema_path})")
    return "\n".join(lines)


def _split_extra_property_errors(
    errors: List[ValidationError],
) -> tuple[List[ValidationError], List[ValidationError]]:
    extra: List[ValidationError] = []
    other: List[ValidationError] = []
    for err in errors:
        if getattr(err, "validator", None) in {
            "additionalProperties",
            "unevaluatedProperties",
        }:
            extra.append(err)
        else:
            other.append(err)
    return extra, other


def validate_config(
    cfg: Dict[str, Any],
    *,
    config_path: Optional[str] = None,
    unknown_keys: str = "error",
) -> None:
    """Brief: Validate a parsed YAML configuration mapping against CONFIG_SCHEMA.

    Inputs:
      - cfg: Dict loaded from YAML (top-level configuration mapping). Delegate
        entries are normalized in place first.
      - config_path: Optional string path to the YAML file, used only for
        error messages.
      - unknown_keys: Policy for keys not described by the schema:
        "ignore", "warn" (log and continue) or "error" (default).

    Outputs:
      - None on success.

    Raises:
      - ConfigurationError: when validation fails, or when unknown_keys is
        "error" and there are extra properties.

    Example:
      >>> validate_config({"echodns": {"suffix": ".example.com"}})
    """

    if unknown_keys not in {"ignore", "warn", "error"}:
        raise ValueError(
            f"unknown_keys policy must be 'ignore', 'warn', or 'error', got {unknown_keys!r}"
        )

    _normalize_delegate_entries_for_validation(cfg)

    validator = Draft202012Validator(CONFIG_SCHEMA)
    all_errors = sorted(validator.iter_errors(cfg), key=lambda e: list(map(str, e.path)))
    if not all_errors:
        return None

    extra_errors, other_errors = _split_extra_property_errors(all_errors)

    if other_errors:
        raise ConfigurationError(
            _format_errors(other_errors + extra_errors, config_path=config_path)
        )

    message = _format_errors(extra_errors, config_path=config_path)
    if unknown_keys == "ignore":
        return None
    if unknown_keys == "warn":
        logger.warning(message)
        return None
    raise ConfigurationError(message)
