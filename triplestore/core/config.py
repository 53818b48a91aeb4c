"""
Configuration system for triplestore.

Loads YAML configuration files and provides typed access to settings.
Uses Pydantic v2 for validation and immutable config objects.

Configuration Hierarchy (highest priority first):
1. CLI arguments (passed to load_config)
2. Environment variables (TRIPLESTORE_*)
3. YAML configuration file
4. Pydantic field defaults

Example triplestore.yaml:

    storage:
      backend: sqlite
      path: .triplestore/store.db
    logging:
      enabled: true
      path: .triplestore/logs.db
    prefixes:
      foaf: http://xmlns.com/foaf/0.1/
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from triplestore.core.backends import create_backend
from triplestore.core.observability import ObservabilityLogger
from triplestore.core.store import Triplestore

# Env fields taken as-is, without _convert_env_value
_VERBATIM_FIELDS = {"path"}


class StorageConfig(BaseModel):
    """Backing key-value store selection."""

    model_config = ConfigDict(frozen=True)

    backend: Literal["memory", "json", "sqlite"] = Field(default="sqlite", description="Backend name")
    path: Path = Field(default=Path(".triplestore/store.db"), description="Store file (json/sqlite)")


class LoggingConfig(BaseModel):
    """Observability write log."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False, description="Record mutations to the log database")
    path: Path = Field(default=Path(".triplestore/logs.db"), description="Path to logs.db")


class TriplestoreConfig(BaseModel):
    """Central configuration object for a triple store."""

    model_config = ConfigDict(frozen=True)

    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    prefixes: dict[str, str] = Field(default_factory=dict, description="CURIE prefix -> IRI prefix")

    @field_validator("prefixes")
    @classmethod
    def validate_prefixes(cls, v: dict[str, str]) -> dict[str, str]:
        invalid = [p for p in v if not p or ":" in p]
        if invalid:
            raise ValueError(f"Invalid prefix names: {invalid}. Prefixes must be non-empty and colon-free")
        return v

    @classmethod
    def from_yaml(cls, path: Path) -> "TriplestoreConfig":
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data, base_path=path.parent)

    @classmethod
    def from_dict(cls, data: dict, base_path: Optional[Path] = None) -> "TriplestoreConfig":
        """Create from dictionary, resolving relative paths against base_path."""
        base_path = base_path or Path(".")

        storage = dict(data.get("storage", {}))
        if storage.get("path"):
            storage["path"] = base_path / storage["path"]

        logging_data = dict(data.get("logging", {}))
        if logging_data.get("path"):
            logging_data["path"] = base_path / logging_data["path"]

        return cls.model_validate({
            "storage": storage,
            "logging": logging_data,
            "prefixes": data.get("prefixes") or {},
        })


def open_store(config: TriplestoreConfig) -> Triplestore:
    """Build a Triplestore from configuration.

    Creates the configured backend, the write log when enabled, and
    binds the configured prefixes.
    """
    if config.storage.backend == "memory":
        backend = create_backend("memory")
    else:
        backend = create_backend(config.storage.backend, path=config.storage.path)

    logger = ObservabilityLogger(config.logging.path) if config.logging.enabled else None

    return Triplestore(backend, prefix_mapping=config.prefixes, logger=logger)


def load_config(
    path: Optional[Path] = None,
    env_prefix: str = "TRIPLESTORE_",
    cli_overrides: Optional[Dict[str, Any]] = None,
    use_env: bool = True,
) -> TriplestoreConfig:
    """Load configuration with hierarchy: defaults → YAML → env vars → CLI args.

    Args:
        path: Optional explicit path to YAML config file
        env_prefix: Prefix for environment variables (default: "TRIPLESTORE_")
        cli_overrides: Optional dictionary of CLI argument overrides
        use_env: Whether to load environment variables (default: True)

    Returns:
        Merged TriplestoreConfig

    Examples:
        # Environment variable: TRIPLESTORE_STORAGE_BACKEND=json
        config = load_config()  # storage.backend will be "json"

        config = load_config(cli_overrides={"storage": {"path": "kb.db"}})
    """
    yaml_path = _find_config_file(path)
    base_path = yaml_path.parent if yaml_path else Path(".")

    if yaml_path:
        with open(yaml_path) as f:
            config_dict = yaml.safe_load(f) or {}
    else:
        config_dict = {}

    # Env and CLI paths are relative to the working directory, not the YAML file
    overrides: Dict[str, Any] = {}
    if use_env:
        _deep_merge(overrides, _extract_env_config(env_prefix))
    if cli_overrides:
        _deep_merge(overrides, cli_overrides)

    config = TriplestoreConfig.from_dict(config_dict, base_path=base_path)
    if not overrides:
        return config

    merged = config.model_dump()
    _deep_merge(merged, overrides)
    return TriplestoreConfig.model_validate(merged)


def _find_config_file(path: Optional[Path] = None) -> Optional[Path]:
    """Find configuration file.

    Searches in this order:
    1. Provided path
    2. ./triplestore.yaml
    3. ./config.yaml

    Returns:
        Path to config file or None if not found
    """
    if path and path.exists():
        return path

    for filename in ["triplestore.yaml", "config.yaml"]:
        config_path = Path(filename)
        if config_path.exists():
            return config_path

    return None


def _extract_env_config(prefix: str = "TRIPLESTORE_") -> Dict[str, Any]:
    """Extract configuration from environment variables.

    Environment variables are mapped to config paths:
    - TRIPLESTORE_STORAGE_BACKEND=json → {"storage": {"backend": "json"}}
    - TRIPLESTORE_LOGGING_ENABLED=true → {"logging": {"enabled": True}}
    - TRIPLESTORE_STORAGE_PATH=kb,v2.db → {"storage": {"path": "kb,v2.db"}}
    - TRIPLESTORE_PREFIXES_FOAF=http://xmlns.com/foaf/0.1/ → {"prefixes": {"foaf": ...}}
    - TRIPLESTORE_PREFIXES_dcTerms=http://purl.org/dc/terms/ → {"prefixes": {"dcTerms": ...}}

    Prefix names written all upper-case are lower-cased; any other spelling
    is kept as given. Paths and prefix IRIs are never type-converted.

    Args:
        prefix: Environment variable prefix (default: "TRIPLESTORE_")

    Returns:
        Dictionary of extracted configuration
    """
    config: Dict[str, Any] = {}
    sections = {"storage", "logging", "prefixes"}

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        raw_key = key[len(prefix):]
        config_key = raw_key.lower()
        if not config_key:
            continue

        section, sep, field = config_key.partition("_")

        if section in sections and field:
            if section == "prefixes":
                name = raw_key[len(section) + len(sep):]
                field = field if name.isupper() else name
                converted = value
            elif field in _VERBATIM_FIELDS:
                converted = value
            else:
                converted = _convert_env_value(value)
            config.setdefault(section, {})[field] = converted
        else:
            config[config_key] = _convert_env_value(value)

    return config


def _convert_env_value(value: str) -> Union[str, int, float, bool, List[str]]:
    """Convert environment variable string to appropriate type.

    Args:
        value: Raw string value from environment

    Returns:
        Converted value (int, float, bool, list, or string)
    """
    if not value:
        return value

    if value.lower() in ("true", "yes", "1", "on"):
        return True
    if value.lower() in ("false", "no", "0", "off"):
        return False

    if "," in value:
        return [v.strip() for v in value.split(",") if v.strip()]

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Deep merge override into base dictionary (mutates base).

    Examples:
        >>> base = {"a": {"b": 1, "c": 2}, "d": 3}
        >>> _deep_merge(base, {"a": {"b": 10}, "e": 5})
        >>> base
        {'a': {'b': 10, 'c': 2}, 'd': 3, 'e': 5}
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            _deep_merge(base[key], value)
        else:
            base[key] = value
