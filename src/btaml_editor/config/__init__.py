"""Configuration management for the BTAML editor."""

from .config_manager import ENV_OVERRIDES, ConfigurationManager, load_config
from .models import ConfigurationError, EditorConfig, ValidationResult

__all__ = [
    "ConfigurationManager",
    "ConfigurationError",
    "EditorConfig",
    "ValidationResult",
    "ENV_OVERRIDES",
    "load_config",
]
