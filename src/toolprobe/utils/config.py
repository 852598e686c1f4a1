"""
Configuration loader for the MCP tool probe.

This module provides configuration management with:
- Multiple configuration sources (files, env vars, CLI)
- Schema validation via pydantic
- Type coercion of environment values
- Configuration merging by priority
"""

import os
import json
import yaml
import toml
from pathlib import Path
from typing import Optional, Dict, Any, List, Union
from pydantic import BaseModel, Field, field_validator, ValidationError, ConfigDict

from .errors import ConfigurationError


ENV_PREFIX = "TOOLPROBE_"
ENV_NESTING = "__"


class ConfigSource(BaseModel):
    """Configuration source definition."""
    path: Optional[Path] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    priority: int = 0
    source_type: str = "dict"

    model_config = ConfigDict(arbitrary_types_allowed=True)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    json_output: bool = False
    directory: Optional[Path] = None

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()


class ProbeConfig(BaseModel):
    """Main probe configuration."""
    app_name: str = "mcp-toolprobe"

    # Connection
    server_url: str = "http://localhost:8080"
    timeout: float = 60.0
    connect_timeout: float = 5.0
    sse_read_timeout: float = 300.0

    # Test selection and pacing
    tool: str = "calculator"
    delay_scale: float = Field(default=1.0, ge=0.0)
    truncate_at: int = Field(default=500, gt=0)
    workdir: Path = Field(default_factory=Path.cwd)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True
    )

    @field_validator('server_url')
    @classmethod
    def validate_server_url(cls, v):
        """Require an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"server URL must be http(s): {v}")
        return v

    @field_validator('workdir')
    @classmethod
    def validate_workdir(cls, v):
        """Ensure path is absolute."""
        return Path(v).expanduser().absolute()


class ConfigLoader:
    """Configuration loader with multiple source support."""

    def __init__(self, env: Optional[Dict[str, str]] = None):
        """
        Initialize configuration loader.

        Args:
            env: Environment mapping to read TOOLPROBE_* values from
                (defaults to os.environ)
        """
        self._sources: List[ConfigSource] = []
        self._env = os.environ if env is None else env

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

    def load(self) -> ProbeConfig:
        """
        Load configuration from all sources.

        Files and dicts are merged in ascending priority, then TOOLPROBE_*
        environment variables; dict sources with a priority above the
        environment (CLI overrides) are applied last.

        Returns:
            Merged configuration
        """
        merged_data: Dict[str, Any] = {}
        ordered = sorted(self._sources, key=lambda s: s.priority)

        for source in (s for s in ordered if s.priority <= 100):
            merged_data = self._deep_merge(merged_data, self._load_source(source))

        merged_data = self._deep_merge(merged_data, self._load_env_vars())

        for source in (s for s in ordered if s.priority > 100):
            merged_data = self._deep_merge(merged_data, self._load_source(source))

        try:
            config = ProbeConfig(**merged_data)
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                errors.append(f"{field}: {error['msg']}")

            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}"
            ) from e

        return config

    def _load_source(self, source: ConfigSource) -> Dict[str, Any]:
        """Load data from a configuration source."""
        if source.path is None:
            return source.data

        if not source.path.exists():
            raise ConfigurationError(
                f"Config file not found: {source.path}",
                path=str(source.path)
            )

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
        except (json.JSONDecodeError, yaml.YAMLError, toml.TomlDecodeError) as e:
            raise ConfigurationError(
                f"Failed to parse {source.path}: {e}",
                path=str(source.path),
                cause=e
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {source.path}")
        return data

    def _load_env_vars(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        result: Dict[str, Any] = {}

        for key, value in self._env.items():
            if not key.startswith(ENV_PREFIX):
                continue

            # TOOLPROBE_LOGGING__LEVEL -> {"logging": {"level": ...}}
            parts = key[len(ENV_PREFIX):].lower().split(ENV_NESTING)
            current = result
            for part in parts[:-1]:
                current = current.setdefault(part, {})

            current[parts[-1]] = self._convert_value(value)

        return result

    def _convert_value(self, value: str) -> Any:
        """Convert string value to appropriate type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        elif value.lower() in ("false", "no", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            else:
                return int(value)
        except ValueError:
            pass

        return value

    def _deep_merge(self, base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in update.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
    env: Optional[Dict[str, str]] = None,
) -> ProbeConfig:
    """Load configuration from an optional file, the environment and CLI overrides."""
    loader = ConfigLoader(env=env)
    if config_file:
        loader.add_source(config_file, priority=10)
    if overrides:
        loader.add_source(
            {k: v for k, v in overrides.items() if v is not None},
            priority=200
        )
    return loader.load()


__all__ = [
    'ProbeConfig',
    'LoggingConfig',
    'ConfigLoader',
    'load_config',
]
