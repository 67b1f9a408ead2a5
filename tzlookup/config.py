"""
tzlookup Configuration System

Configuration management with YAML files, environment variables, schema
validation, and runtime overrides.

Configuration Sources (in order of precedence):
    1. Environment variables (TZLOOKUP_*)
    2. Runtime overrides
    3. User config file (~/.tzlookup/config.yaml)
    4. Project config file (./tzlookup.yaml)
    5. Default values

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import copy
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar, Union

import yaml
from jsonschema import Draft202012Validator

T = TypeVar("T")

DEFAULT_DATA_PATHS = [
    "/data/misc/zoneinfo/current/tzlookup.xml",
    "/system/usr/share/zoneinfo/tzlookup.xml",
]

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")
LOG_FORMATS = ("json", "text")

CONFIG_FILE_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "data": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "paths": {
                    "type": "array",
                    "items": {"type": "string", "minLength": 1},
                },
            },
        },
        "observability": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "log_level": {"enum": list(LOG_LEVELS)},
                "log_format": {"enum": list(LOG_FORMATS)},
            },
        },
    },
}


class ConfigError(Exception):
    """Configuration error."""
    pass


class ValidationError(ConfigError):
    """Configuration validation error."""
    pass


_UNSET: Any = object()


@dataclass
class ConfigValue(Generic[T]):
    """
    A single configuration value with metadata.

    Supports default values, environment variable binding, validation, and
    change callbacks. An explicitly set None is kept (it does not fall back to
    the default).
    """
    default: T
    env_var: Optional[str] = None
    description: str = ""
    validator: Optional[Callable[[T], bool]] = None
    _value: Any = field(default=_UNSET, repr=False)
    _callbacks: List[Callable[[Any, T], None]] = field(default_factory=list, repr=False)

    def get(self) -> T:
        """Get the current value."""
        if self.env_var and self.env_var in os.environ:
            return self._coerce(os.environ[self.env_var])
        return self.default if self._value is _UNSET else self._value

    def set(self, value: T) -> None:
        """Set the value with validation."""
        if value is not None and self.validator and not self.validator(value):
            raise ValidationError(f"Invalid value for config: {value!r}")

        old_value = None if self._value is _UNSET else self._value
        self._value = value

        for callback in self._callbacks:
            callback(old_value, value)

    def reset(self) -> None:
        self._value = _UNSET

    def _coerce(self, value: str) -> T:
        """Coerce string value to target type."""
        target_type = type(self.default)

        if target_type == bool:
            return value.lower() in ("true", "1", "yes", "on")  # type: ignore
        elif target_type == int:
            return int(value)  # type: ignore
        elif target_type == list:
            return [part for part in value.split(os.pathsep) if part]  # type: ignore
        else:
            return value  # type: ignore

    def on_change(self, callback: Callable[[Any, T], None]) -> None:
        """Register a change callback."""
        self._callbacks.append(callback)


@dataclass
class DataConfig:
    """Where the tzlookup document lives."""
    paths: ConfigValue[list] = field(default_factory=lambda: ConfigValue(
        default=list(DEFAULT_DATA_PATHS),
        env_var="TZLOOKUP_DATA_PATHS",
        description="Candidate tzlookup.xml paths, first readable one wins (os.pathsep separated)",
        validator=lambda x: isinstance(x, list) and all(isinstance(p, str) and p for p in x),
    ))


@dataclass
class ObservabilityConfig:
    """Configuration for logging."""
    log_level: ConfigValue[str] = field(default_factory=lambda: ConfigValue(
        default="warning",
        env_var="TZLOOKUP_LOG_LEVEL",
        description="Log level (debug, info, warning, error, critical)",
        validator=lambda x: x in LOG_LEVELS,
    ))
    log_format: ConfigValue[str] = field(default_factory=lambda: ConfigValue(
        default="json",
        env_var="TZLOOKUP_LOG_FORMAT",
        description="Log format (json, text)",
        validator=lambda x: x in LOG_FORMATS,
    ))


@dataclass
class TzLookupConfig:
    """Root configuration."""
    data: DataConfig = field(default_factory=DataConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        def extract_values(obj: Any) -> Any:
            if isinstance(obj, ConfigValue):
                return obj.get()
            elif hasattr(obj, "__dataclass_fields__"):
                return {k: extract_values(getattr(obj, k)) for k in obj.__dataclass_fields__}
            return obj

        return extract_values(self)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), default_flow_style=False)


def validate_config_data(data: Any, source: str = "<config>") -> None:
    """Check parsed YAML against CONFIG_FILE_SCHEMA."""
    validator = Draft202012Validator(CONFIG_FILE_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        details = "; ".join(
            f"{'.'.join(str(p) for p in e.path) or '<root>'}: {e.message}" for e in errors
        )
        raise ConfigError(f"Invalid configuration in {source}: {details}")


class ConfigManager:
    """
    Configuration manager with file loading and environment binding.

    Thread-safe singleton that manages configuration lifecycle.
    """

    _instance: Optional["ConfigManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "ConfigManager":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._initialized = False
            return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._config = TzLookupConfig()
        self._config_paths: List[Path] = []
        self._watchers: List[Callable[[TzLookupConfig], None]] = []
        self._initialized = True

    @property
    def config(self) -> TzLookupConfig:
        return self._config

    def load_from_file(self, path: Union[str, Path]) -> None:
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Unable to parse {path}: {e}") from e

        if data:
            validate_config_data(data, str(path))
            self._apply_dict(data)
        if path not in self._config_paths:
            self._config_paths.append(path)

    def load_defaults(self) -> None:
        """Load default configuration files if they exist."""
        default_paths = [
            Path.home() / ".tzlookup" / "config.yaml",
            Path("tzlookup.yaml"),
        ]

        for path in default_paths:
            if path.exists():
                self.load_from_file(path)

    def _apply_dict(self, data: Dict[str, Any]) -> None:
        """Apply dictionary values to configuration."""
        def apply_to_config(config_obj: Any, values: Dict[str, Any]) -> None:
            for key, value in values.items():
                if hasattr(config_obj, key):
                    attr = getattr(config_obj, key)
                    if isinstance(attr, ConfigValue):
                        attr.set(value)
                    elif hasattr(attr, "__dataclass_fields__") and isinstance(value, dict):
                        apply_to_config(attr, value)

        apply_to_config(self._config, data)

    def set(self, path: str, value: Any) -> None:
        """
        Set a configuration value by path.

        Example: config.set("observability.log_level", "debug")
        """
        parts = path.split(".")
        obj: Any = self._config

        for part in parts[:-1]:
            obj = getattr(obj, part, None)
            if obj is None:
                raise ConfigError(f"Invalid config path: {path}")

        attr = getattr(obj, parts[-1], None)
        if isinstance(attr, ConfigValue):
            attr.set(value)
        else:
            raise ConfigError(f"Invalid config path: {path}")

    def get(self, path: str) -> Any:
        """
        Get a configuration value by path.

        Example: config.get("data.paths")
        """
        obj: Any = self._config
        for part in path.split("."):
            if not hasattr(obj, part):
                raise ConfigError(f"Invalid config path: {path}")
            obj = getattr(obj, part)

        if isinstance(obj, ConfigValue):
            return obj.get()
        return obj

    def watch(self, callback: Callable[[TzLookupConfig], None]) -> None:
        """Register a callback for configuration changes."""
        self._watchers.append(callback)

    def reload(self) -> None:
        """
        Reload configuration from all loaded files.

        If any file fails to load the previous configuration is restored and
        the error is re-raised.
        """
        snapshot = copy.deepcopy(self._config)
        try:
            for path in self._config_paths:
                if path.exists():
                    self.load_from_file(path)
        except Exception:
            self._config = snapshot
            raise

        for watcher in self._watchers:
            watcher(self._config)

    def validate(self) -> List[str]:
        """
        Validate all configuration values.

        Returns list of validation errors.
        """
        errors: List[str] = []

        def validate_config(obj: Any, path: str = "") -> None:
            if isinstance(obj, ConfigValue):
                try:
                    value = obj.get()
                    if obj.validator and not obj.validator(value):
                        errors.append(f"{path}: validation failed for value {value!r}")
                except Exception as e:
                    errors.append(f"{path}: {e}")
            elif hasattr(obj, "__dataclass_fields__"):
                for field_name in obj.__dataclass_fields__:
                    field_path = f"{path}.{field_name}" if path else field_name
                    validate_config(getattr(obj, field_name), field_path)

        validate_config(self._config)
        return errors


def get_config() -> TzLookupConfig:
    """Get the current tzlookup configuration."""
    return ConfigManager().config


def get_config_manager() -> ConfigManager:
    """Get the configuration manager instance."""
    return ConfigManager()
