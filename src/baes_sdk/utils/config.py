"""
Configuration loader for the BAES SDK.

This module provides configuration management with:
- Multiple configuration sources (files, env vars, explicit overrides)
- Schema validation
- Type coercion
- Configuration merging
"""

import os
import json
import yaml
import toml
from pathlib import Path
from typing import Optional, Dict, Any, List, Union
from pydantic import BaseModel, Field, field_validator, ValidationError, ConfigDict

from .logging import get_logger
from .errors import ConfigurationError


logger = get_logger("baes-sdk.config")

ENV_PREFIX = "BAES_"
PINATA_KEY_ENV = "PINATA_JWT"


class ConfigSource(BaseModel):
    """Configuration source definition."""
    path: Optional[Path] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    priority: int = 0
    source_type: str = "dict"

    model_config = ConfigDict(arbitrary_types_allowed=True)


class BaesConfig(BaseModel):
    """SDK configuration, immutable once built."""
    api_key: Optional[str] = None
    debug: bool = False
    log_level: str = "INFO"

    # Pinata endpoints
    api_url: str = "https://api.pinata.cloud"
    gateway_url: str = "https://gateway.pinata.cloud/ipfs"
    request_timeout: float = 30.0
    query_limit: int = Field(default=1000, ge=1, le=1000)

    # Checkpoint manager
    fetch_concurrency: int = Field(default=8, ge=1)
    schema_version: str = "1.0.0"

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator('log_level')
    @classmethod
    def validate_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator('api_url', 'gateway_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @property
    def effective_log_level(self) -> str:
        """Debug mode forces DEBUG logging."""
        return "DEBUG" if self.debug else self.log_level


class ConfigLoader:
    """Configuration loader with multiple source support."""

    def __init__(self):
        """Initialize configuration loader."""
        self._sources: List[ConfigSource] = []

    def add_source(
        self,
        source: Union[str, Path, Dict[str, Any]],
        priority: int = 0,
        source_type: Optional[str] = None
    ) -> None:
        """
        Add configuration source.

        Args:
            source: Configuration source (file path or dict)
            priority: Source priority (higher wins)
            source_type: Source type (auto-detected if None)
        """
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not source_type:
                source_type = self._detect_source_type(path)

            self._sources.append(ConfigSource(
                path=path,
                priority=priority,
                source_type=source_type
            ))
        else:
            self._sources.append(ConfigSource(
                data=source,
                priority=priority,
                source_type="dict"
            ))

    def _detect_source_type(self, path: Path) -> str:
        """Detect configuration file type."""
        suffix = path.suffix.lower()
        if suffix == ".json":
            return "json"
        elif suffix in (".yaml", ".yml"):
            return "yaml"
        elif suffix == ".toml":
            return "toml"
        else:
            raise ConfigurationError(f"Unknown config file type: {suffix}")

    def load(self, environ: Optional[Dict[str, str]] = None) -> BaesConfig:
        """
        Load configuration from all sources.

        Precedence, lowest first: sources by ascending priority, then
        environment variables, then sources with priority above 100.

        Returns:
            Merged configuration
        """
        environ = os.environ if environ is None else environ
        merged_data: Dict[str, Any] = {}

        ordered = sorted(self._sources, key=lambda s: s.priority)
        for source in (s for s in ordered if s.priority <= 100):
            merged_data.update(self._load_source(source))

        merged_data.update(self._load_env_vars(environ))

        for source in (s for s in ordered if s.priority > 100):
            merged_data.update(self._load_source(source))

        try:
            config = BaesConfig(**merged_data)
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                errors.append(f"{field}: {error['msg']}")

            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}"
            ) from e

        logger.debug("configuration_loaded", sources=len(self._sources))
        return config

    def _load_source(self, source: ConfigSource) -> Dict[str, Any]:
        """Load data from a configuration source."""
        if source.path is None:
            return dict(source.data)

        if not source.path.exists():
            raise ConfigurationError(f"Config file not found: {source.path}")

        content = source.path.read_text()

        try:
            if source.source_type == "json":
                data = json.loads(content)
            elif source.source_type == "yaml":
                data = yaml.safe_load(content) or {}
            elif source.source_type == "toml":
                data = toml.loads(content)
            else:
                raise ConfigurationError(f"Unknown source type: {source.source_type}")
        except (ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to parse {source.path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {source.path}")
        return data

    def _load_env_vars(self, environ: Dict[str, str]) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        result: Dict[str, Any] = {}

        if environ.get(PINATA_KEY_ENV):
            result["api_key"] = environ[PINATA_KEY_ENV]

        for key, value in environ.items():
            if key.startswith(ENV_PREFIX):
                name = key[len(ENV_PREFIX):].lower()
                if name in BaesConfig.model_fields:
                    result[name] = self._convert_value(value)

        return result

    def _convert_value(self, value: str) -> Any:
        """Convert string value to appropriate type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        elif value.lower() in ("false", "no", "off"):
            return False
        # Numbers and plain strings are coerced by the model itself
        return value


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    environ: Optional[Dict[str, str]] = None,
    **overrides: Any
) -> BaesConfig:
    """
    Load configuration from an optional file, the environment and overrides.

    Args:
        config_path: JSON, YAML or TOML file
        environ: Environment mapping (defaults to os.environ)
        **overrides: Explicit values, highest precedence

    Returns:
        A new frozen configuration
    """
    loader = ConfigLoader()

    if config_path:
        loader.add_source(config_path, priority=10)

    explicit = {k: v for k, v in overrides.items() if v is not None}
    if explicit:
        loader.add_source(explicit, priority=200)

    return loader.load(environ)


__all__ = [
    'BaesConfig',
    'ConfigLoader',
    'load_config',
]
