"""Layered configuration.

The effective configuration is folded left to right from four partial
layers: built-in defaults, the persisted config file, ``SVGEN_*``
environment variables and explicit per-invocation overrides. A layer only
contributes the keys it defines, so a later layer can never erase a value
with ``None``.
"""

import json
import logging
import math
import os
from pathlib import Path
from typing import Any, Iterable, Mapping, NamedTuple, Optional, Union

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .exceptions import ConfigCorruptError, ConfigInvalidError
from .paths import get_cache_dir, get_config_path

logger = logging.getLogger("svgen.config")

DEFAULT_ENDPOINT = "https://api.quiver.ai"
DEFAULT_MODEL = "arrow-preview"
DEFAULT_TIMEOUT_MS = 60_000
DEFAULT_RETRIES = 2
DEFAULT_POLL_INTERVAL_MS = 2_000

DEFAULTS: dict[str, Any] = {
    "endpoint": DEFAULT_ENDPOINT,
    "timeout": DEFAULT_TIMEOUT_MS,
    "retries": DEFAULT_RETRIES,
    "pollInterval": DEFAULT_POLL_INTERVAL_MS,
    "model": DEFAULT_MODEL,
}

# Persisted key -> environment variables, first non-empty wins.
ENV_VARS: dict[str, tuple[str, ...]] = {
    "endpoint": ("SVGEN_ENDPOINT",),
    "region": ("SVGEN_REGION",),
    "timeout": ("SVGEN_TIMEOUT",),
    "retries": ("SVGEN_RETRIES",),
    "pollInterval": ("SVGEN_POLL_INTERVAL",),
    "model": ("SVGEN_MODEL",),
    "apiKey": ("SVGEN_API_KEY", "QUIVERAI_API_KEY"),
}

NUMERIC_CONFIG_KEYS = frozenset({"timeout", "retries", "pollInterval"})
SECRET_CONFIG_KEYS = frozenset({"apiKey"})

_url_adapter = TypeAdapter(AnyUrl)


class _ConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True, populate_by_name=True)

    @field_validator("endpoint", check_fields=False)
    @classmethod
    def _endpoint_is_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            _url_adapter.validate_python(value)
        except ValidationError:
            raise ValueError("must be a valid URL") from None
        return value


class PersistedConfig(_ConfigModel):
    """Exactly what is written to the config file. Every key is optional."""

    endpoint: Optional[str] = None
    region: Optional[str] = Field(None, min_length=1)
    timeout: Optional[int] = Field(None, ge=1, le=600_000)
    retries: Optional[int] = Field(None, ge=0, le=10)
    poll_interval: Optional[int] = Field(None, alias="pollInterval", ge=250, le=60_000)
    model: Optional[str] = Field(None, min_length=1)
    api_key: Optional[str] = Field(None, alias="apiKey", min_length=1)


class EffectiveConfig(_ConfigModel):
    """Fully defaulted configuration used by an operation."""

    endpoint: str
    region: Optional[str] = Field(None, min_length=1)
    timeout: int = Field(ge=1, le=600_000)
    retries: int = Field(ge=0, le=10)
    poll_interval: int = Field(alias="pollInterval", ge=250, le=60_000)
    model: str = Field(min_length=1)
    api_key: Optional[str] = Field(None, alias="apiKey", min_length=1)


CONFIG_KEYS = tuple(field.alias or name for name, field in PersistedConfig.model_fields.items())
_NAME_TO_KEY = {name: field.alias or name for name, field in PersistedConfig.model_fields.items()}


class PersistedConfigFile(NamedTuple):
    path: Path
    exists: bool
    config: PersistedConfig


class ResolvedConfig(NamedTuple):
    config_path: Path
    cache_dir: Path
    persisted: PersistedConfig
    effective: EffectiveConfig


def _invalid(exc: ValidationError) -> ConfigInvalidError:
    issue = exc.errors(include_url=False)[0]
    field = ".".join(str(part) for part in issue["loc"]) or "config"
    return ConfigInvalidError(field, issue["msg"])


def _config_key(key: str) -> str:
    """Normalize a snake_case attribute name or camelCase key to the persisted key."""
    if key in CONFIG_KEYS:
        return key
    if key in _NAME_TO_KEY:
        return _NAME_TO_KEY[key]
    raise ConfigInvalidError(key, "unknown config key")


def _parse_number(value: str) -> Optional[Union[int, float]]:
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _layer(values: Union[PersistedConfig, Mapping[str, Any], None]) -> dict[str, Any]:
    """Turn a partial config into a persisted-key map of defined values only."""
    if values is None:
        return {}
    if isinstance(values, PersistedConfig):
        return values.model_dump(by_alias=True, exclude_none=True)
    return {_config_key(key): value for key, value in values.items() if value is not None}


def merge_layers(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Fold partial layers left to right; later defined keys win."""
    merged: dict[str, Any] = {}
    for layer in layers:
        merged.update({key: value for key, value in layer.items() if value is not None})
    return merged


def parse_env_config(env: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Read the recognized ``SVGEN_*`` variables into a validated layer."""
    env = os.environ if env is None else env
    candidate: dict[str, Any] = {}
    for key, names in ENV_VARS.items():
        raw = next((env[name] for name in names if env.get(name)), None)
        if raw is None:
            continue
        if key in NUMERIC_CONFIG_KEYS:
            number = _parse_number(raw)
            if number is None:
                logger.debug("Ignoring non-numeric %s=%r", names[0], raw)
                continue
            candidate[key] = number
        else:
            candidate[key] = raw

    try:
        return _layer(PersistedConfig.model_validate(candidate))
    except ValidationError as exc:
        raise _invalid(exc) from exc


def read_persisted_config(path: Optional[Path] = None) -> PersistedConfigFile:
    """Read and validate the config file. A missing file is an empty layer."""
    config_path = Path(path) if path else get_config_path()
    try:
        content = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No config file at %s", config_path)
        return PersistedConfigFile(config_path, False, PersistedConfig())
    except UnicodeDecodeError as exc:
        raise ConfigCorruptError(str(config_path), "Invalid encoding", str(exc)) from exc

    try:
        raw = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigCorruptError(str(config_path), "Invalid JSON", str(exc)) from exc

    try:
        config = PersistedConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigCorruptError(
            str(config_path), "Invalid config schema", exc.errors(include_url=False)
        ) from exc

    return PersistedConfigFile(config_path, True, config)


def write_persisted_config(
    config: Union[PersistedConfig, Mapping[str, Any]],
    path: Optional[Path] = None,
) -> Path:
    """Validate and write the whole config object, replacing the file."""
    config_path = Path(path) if path else get_config_path()
    try:
        normalized = PersistedConfig.model_validate(_layer(config))
    except ValidationError as exc:
        raise _invalid(exc) from exc

    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = normalized.model_dump(by_alias=True, exclude_none=True)
    config_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    logger.debug("Wrote config to %s", config_path)
    return config_path


def update_persisted_config(changes: Mapping[str, Any], path: Optional[Path] = None) -> Path:
    """Set keys on a fresh read of the config file and write it back."""
    current = read_persisted_config(path)
    merged = merge_layers(_layer(current.config), _layer(changes))
    return write_persisted_config(merged, current.path)


def unset_persisted_config(keys: Iterable[str], path: Optional[Path] = None) -> Path:
    """Remove keys from a fresh read of the config file and write it back."""
    current = read_persisted_config(path)
    remaining = _layer(current.config)
    for key in keys:
        remaining.pop(_config_key(key), None)
    return write_persisted_config(remaining, current.path)


def coerce_config_value(key: str, raw: str) -> Union[str, int, float]:
    """Convert command-line text for ``key`` into the type the schema expects."""
    key = _config_key(key)
    if not raw:
        raise ConfigInvalidError(key, "value cannot be empty")
    if key in NUMERIC_CONFIG_KEYS:
        number = _parse_number(raw)
        if number is None:
            raise ConfigInvalidError(key, f"expected a numeric value, got {raw!r}")
        return number
    return raw


def redact_config(values: Mapping[str, Any]) -> dict[str, Any]:
    """Mask secret values for display."""
    return {
        key: ("********" if key in SECRET_CONFIG_KEYS and value else value)
        for key, value in values.items()
    }


def resolve_effective_config(
    overrides: Union[PersistedConfig, Mapping[str, Any], None] = None,
    env: Optional[Mapping[str, str]] = None,
    path: Optional[Path] = None,
) -> ResolvedConfig:
    """Resolve defaults < config file < environment < overrides.

    Raises:
        ConfigCorruptError: the config file is malformed.
        ConfigInvalidError: an environment value, override or the merged
            result violates the config rules.
    """
    persisted_file = read_persisted_config(path)
    env_layer = parse_env_config(env)

    override_layer = _layer(overrides)
    try:
        PersistedConfig.model_validate(override_layer)
    except ValidationError as exc:
        raise _invalid(exc) from exc

    merged = merge_layers(DEFAULTS, _layer(persisted_file.config), env_layer, override_layer)
    try:
        effective = EffectiveConfig.model_validate(merged)
    except ValidationError as exc:
        raise _invalid(exc) from exc

    return ResolvedConfig(
        config_path=persisted_file.path,
        cache_dir=get_cache_dir(),
        persisted=persisted_file.config,
        effective=effective,
    )
