"""Configuration parsing and resolver assembly for echodns.

Brief:
  This module turns a YAML document (plus environment and CLI overrides)
  into a ready EchoResolver. It centralizes:
    - reading and schema-validating YAML config files
    - suffix precedence (CLI > ECHODNS_SUFFIX > file > "")
    - loading delegates from config entries and running their setup()
    - composing configuration, native resolver and delegate chain

Inputs:
  - YAML config dicts and paths

Outputs:
  - ResolverConfiguration, delegate instances and EchoResolver objects
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import yaml
from pydantic import ValidationError

from .config_model import ResolverConfiguration
from .config_schema import validate_config
from ..delegates.base import BaseDelegate
from ..delegates.registry import alias_table, get_delegate_class
from ..delegates.system import SystemDelegate
from ..errors import ConfigurationError
from ..resolver import EchoResolver, NativeResolver

logger = logging.getLogger(__name__)

SUFFIX_ENV = "ECHODNS_SUFFIX"

DelegateSpec = Union[str, Dict[str, Any]]


def parse_config_file(config_path: str, *, unknown_keys: str = "error") -> Dict[str, Any]:
    """Brief: Read and schema-validate a YAML config file.

    Inputs:
      - config_path: Path to the YAML configuration file.
      - unknown_keys: Extra-property policy passed to validate_config.

    Outputs:
      - dict: Parsed and normalized configuration mapping.

    Raises:
      - ConfigurationError: when the file cannot be read or parsed, or fails
        validation.
    """

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config {config_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Cannot parse config {config_path}: {exc}") from exc

    if not isinstance(cfg, dict):
        raise ConfigurationError("Configuration root must be a mapping")

    validate_config(cfg, config_path=config_path, unknown_keys=unknown_keys)
    return cfg


def resolve_suffix(
    cfg: Optional[Mapping[str, Any]] = None,
    *,
    cli_suffix: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Brief: Pick the effective suffix.

    Inputs:
      - cfg: Parsed config mapping (echodns.suffix).
      - cli_suffix: Value of --suffix, when given.
      - environ: Environment mapping (defaults to os.environ).

    Outputs:
      - str: CLI value, else ECHODNS_SUFFIX, else the file value, else "".

    Example:
      >>> resolve_suffix({"echodns": {"suffix": ".a"}}, environ={"ECHODNS_SUFFIX": ".b"})
      '.b'
    """

    if cli_suffix is not None:
        return cli_suffix
    env = os.environ if environ is None else environ
    if SUFFIX_ENV in env:
        return env[SUFFIX_ENV]
    section = (cfg or {}).get("echodns") or {}
    return str(section.get("suffix", ""))


def build_configuration(
    cfg: Optional[Mapping[str, Any]] = None,
    *,
    cli_suffix: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ResolverConfiguration:
    return ResolverConfiguration(
        suffix=resolve_suffix(cfg, cli_suffix=cli_suffix, environ=environ)
    )


def _validate_delegate_config(
    delegate_cls: type[BaseDelegate], config: Optional[Dict[str, Any]]
) -> Dict[str, Any]:
    """Brief: Validate delegate configuration through its pydantic model, if any.

    Inputs:
      - delegate_cls: Delegate class.
      - config: Raw config mapping for this delegate (may be None).

    Outputs:
      - dict: Validated mapping (model_dump of the model) or the config as-is
        when the delegate exposes no model.
    """

    cfg = dict(config or {})
    model_cls = delegate_cls.get_config_model()
    if model_cls is None:
        return cfg
    try:
        model_instance = model_cls(**cfg)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid configuration for delegate {delegate_cls.__name__}: {exc}"
        ) from exc
    return dict(model_instance.model_dump())


def load_delegates(specs: Optional[Sequence[DelegateSpec]]) -> List[BaseDelegate]:
    """
    Instantiate delegates from config entries, preserving order.

    Each entry is either an alias / dotted class path string or a mapping
    {"module": <path-or-alias>, "name": <optional label>, "config": {...}}.

    Example use:
        >>> delegates = load_delegates(["system", {"module": "hosts", "config": {"hosts": {"db": "10.0.0.5"}}}])
        >>> [d.name for d in delegates]
        ['system', 'hosts']
    """
    aliases = alias_table()
    delegates: List[BaseDelegate] = []
    for spec in specs or []:
        if isinstance(spec, str):
            module_path, name, config = spec, None, {}
        else:
            module_path = spec.get("module")
            name = spec.get("name")
            config = spec.get("config") or {}
        if not module_path:
            continue

        try:
            delegate_cls = get_delegate_class(str(module_path), aliases)
        except (KeyError, ImportError, AttributeError, TypeError, ValueError) as exc:
            raise ConfigurationError(f"Cannot load delegate {module_path!r}: {exc}") from exc
        validated = _validate_delegate_config(delegate_cls, config)
        delegates.append(delegate_cls(name=name, **validated))
    return delegates


def run_delegate_setup(delegates: Sequence[BaseDelegate]) -> List[BaseDelegate]:
    """
    Run setup() on every delegate in chain order and return the usable ones.

    Failures raise ConfigurationError unless the delegate was configured with
    abort_on_failure: false, in which case it is logged and left out.
    """
    active: List[BaseDelegate] = []
    for delegate in delegates:
        abort_on_failure = bool(delegate.config.get("abort_on_failure", True))
        logger.info(
            "Running setup for delegate %s (abort_on_failure=%s)",
            delegate.name,
            abort_on_failure,
        )
        try:
            delegate.setup()
        except Exception as exc:
            logger.error("Setup for delegate %s failed: %s", delegate.name, exc)
            if abort_on_failure:
                raise ConfigurationError(f"Setup for delegate {delegate.name} failed: {exc}") from exc
            logger.warning(
                "Continuing startup without delegate %s because abort_on_failure is False",
                delegate.name,
            )
            continue
        active.append(delegate)
    return active


def build_resolver(
    cfg: Optional[Dict[str, Any]] = None,
    *,
    cli_suffix: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    native: Optional[NativeResolver] = None,
    extra_delegates: Sequence[DelegateSpec] = (),
) -> EchoResolver:
    """Brief: Compose an EchoResolver from a (validated) config mapping.

    Inputs:
      - cfg: Config mapping as returned by parse_config_file (or None).
      - cli_suffix / environ: Suffix overrides, see resolve_suffix.
      - native: Native resolver to use; defaults to SystemDelegate unless
        echodns.native is false.
      - extra_delegates: Additional delegate specs appended after the
        configured ones (used for CLI --delegate).

    Outputs:
      - EchoResolver ready for concurrent use.

    Raises:
      - ConfigurationError: on invalid suffix, unknown delegates, invalid
        delegate config, or failing delegate setup.
    """

    cfg = cfg or {}
    config = build_configuration(cfg, cli_suffix=cli_suffix, environ=environ)

    if native is None and bool((cfg.get("echodns") or {}).get("native", True)):
        native = SystemDelegate(name="native")

    delegates = load_delegates(list(cfg.get("delegates") or []) + list(extra_delegates))
    active = run_delegate_setup(delegates)
    logger.info(
        "Built resolver: suffix=%r native=%s delegates=%s",
        config.suffix,
        native is not None,
        [d.name for d in active],
    )
    return EchoResolver(config, native=native, delegates=active)
