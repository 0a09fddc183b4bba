"""Configuration Manager for the BTAML editor.

Loads editor settings from a dictionary or JSON file, validates them and
applies ``BTAML_*`` environment variable overrides.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..models.enums import UnknownTagPolicy
from .models import ConfigurationError, EditorConfig, ValidationResult

logger = logging.getLogger(__name__)

# Environment variable -> config field.
ENV_OVERRIDES = {
    "BTAML_HISTORY_DEPTH": "history_depth",
    "BTAML_UNKNOWN_TAG_POLICY": "unknown_tag_policy",
    "BTAML_MEDIA_ROOT": "media_root",
    "BTAML_MEDIA_BASE_URL": "media_base_url",
    "BTAML_DATABASE_URL": "database_url",
    "BTAML_MAX_IMAGE_BYTES": "max_image_bytes",
}

_POSITIVE_INT_FIELDS = (
    "youtube_width",
    "youtube_height",
    "max_image_bytes",
    "max_video_bytes",
    "excerpt_length",
)
_STRING_FIELDS = ("media_root", "media_base_url", "media_prefix")
_INT_ENV_FIELDS = ("history_depth", "max_image_bytes")


class ConfigurationManager:
    """
    Manager for editor configuration.

    Handles loading, validation, environment overrides and export of an
    EditorConfig.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Optional JSON file used by `save_to_file` when no
                path is given.
        """
        self._config_path = Path(config_path) if config_path else None
        self._configuration = EditorConfig()
        self._is_loaded = False

    @property
    def configuration(self) -> EditorConfig:
        """Get the current editor configuration."""
        return self._configuration

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._is_loaded

    def load(self, source: Union[str, Path, Dict[str, Any]]) -> ValidationResult:
        """
        Load and validate configuration.

        Args:
            source: JSON file path or dictionary of settings. Missing keys
                keep their defaults.

        Returns:
            ValidationResult with any warnings (such as unknown keys).

        Raises:
            ConfigurationError: If the file is missing or a value is invalid.
        """
        if isinstance(source, (str, Path)):
            self._config_path = Path(source)
        raw_data = self._parse_source(source)
        if not isinstance(raw_data, dict):
            raise ConfigurationError("Configuration must be a JSON object")

        result, config = self._validate(raw_data)
        if not result.is_valid:
            raise ConfigurationError("Editor configuration validation failed", validation_result=result)

        self._configuration = config
        self._is_loaded = True
        for warning in result.warnings:
            logger.warning(warning)
        return result

    def apply_environment(self, environ: Optional[Mapping[str, str]] = None) -> ValidationResult:
        """
        Override settings from ``BTAML_*`` environment variables.

        Raises:
            ConfigurationError: If an override holds an invalid value.
        """
        environ = os.environ if environ is None else environ
        data = self._configuration.to_dict()
        result = ValidationResult(is_valid=True)
        for name, field_name in ENV_OVERRIDES.items():
            if name not in environ:
                continue
            value: Any = environ[name]
            if field_name in _INT_ENV_FIELDS:
                try:
                    value = int(value)
                except ValueError:
                    result.add_error(f"{name}: expected an integer, got {value!r}")
                    continue
            data[field_name] = value
            logger.info(f"Configuration override from {name}")

        if not result.is_valid:
            raise ConfigurationError("Invalid environment override", validation_result=result)

        env_result, config = self._validate(data)
        if not env_result.is_valid:
            raise ConfigurationError("Invalid environment override", validation_result=env_result)
        self._configuration = config
        return result.merge(env_result)

    def _validate(self, data: Dict[str, Any]) -> Tuple[ValidationResult, Optional[EditorConfig]]:
        """Validate a settings dictionary and build the config it describes."""
        result = ValidationResult(is_valid=True)
        defaults = EditorConfig().to_dict()

        for key in data:
            if key not in defaults:
                result.add_warning(f"Unknown configuration key '{key}' ignored")

        values = {**defaults, **{k: v for k, v in data.items() if k in defaults}}

        depth = values["history_depth"]
        if depth is not None and (isinstance(depth, bool) or not isinstance(depth, int) or depth < 1):
            result.add_error("'history_depth' must be a positive integer or null")

        policy = values["unknown_tag_policy"]
        valid_policies = [p.value for p in UnknownTagPolicy]
        if isinstance(policy, UnknownTagPolicy):
            policy = policy.value
        if policy not in valid_policies:
            result.add_error(f"'unknown_tag_policy' must be one of {valid_policies}")

        for name in _POSITIVE_INT_FIELDS:
            value = values[name]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                result.add_error(f"'{name}' must be a positive integer")

        for name in _STRING_FIELDS:
            if not isinstance(values[name], str) or not values[name].strip():
                result.add_error(f"'{name}' must be a non-empty string")

        database_url = values["database_url"]
        if database_url is not None and (not isinstance(database_url, str) or not database_url.strip()):
            result.add_error("'database_url' must be a non-empty string or null")

        if not result.is_valid:
            return result, None

        values["unknown_tag_policy"] = UnknownTagPolicy(policy)
        values["media_base_url"] = values["media_base_url"].rstrip("/") or "/"
        values["media_prefix"] = values["media_prefix"].strip("/")
        return result, EditorConfig(**values)

    def _parse_source(self, source: Union[str, Path, Dict[str, Any]]) -> Any:
        """Parse configuration source to raw data."""
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")
            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {path}: {e}")
        return source

    def save_to_file(self, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Save the current configuration as JSON.

        Args:
            path: File to write. Uses the path the configuration was loaded
                from if None.
        """
        path = Path(path) if path else self._config_path
        if not path:
            raise ConfigurationError("No configuration file specified")
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        return path

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._configuration = EditorConfig()
        self._is_loaded = False

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as a dictionary."""
        return self._configuration.to_dict()


def load_config(source: Optional[Union[str, Path, Dict[str, Any]]] = None,
                environ: Optional[Mapping[str, str]] = None) -> EditorConfig:
    """Load settings from `source` (if given), then apply environment overrides."""
    manager = ConfigurationManager()
    if source is not None:
        manager.load(source)
    manager.apply_environment(environ)
    return manager.configuration
