"""Unit tests for the Configuration Manager."""

import json
import tempfile
from pathlib import Path

import pytest

from btaml_editor.config import (
    ConfigurationError,
    ConfigurationManager,
    EditorConfig,
    ValidationResult,
    load_config,
)
from btaml_editor.models import UnknownTagPolicy


class TestLoadConfiguration:
    """Tests for loading editor settings."""

    def test_defaults(self):
        """Test an unloaded manager exposes the default configuration."""
        manager = ConfigurationManager()

        assert not manager.is_loaded
        assert manager.configuration == EditorConfig()
        assert manager.configuration.unknown_tag_policy == UnknownTagPolicy.UNWRAP

    def test_load_from_dict(self):
        """Test loading settings from a dictionary."""
        manager = ConfigurationManager()

        result = manager.load({
            "history_depth": 50,
            "unknown_tag_policy": "drop",
            "youtube_width": 640,
            "media_base_url": "https://cdn.example.com/media/",
        })

        assert result.is_valid
        assert manager.is_loaded
        config = manager.configuration
        assert config.history_depth == 50
        assert config.unknown_tag_policy == UnknownTagPolicy.DROP
        assert config.youtube_width == 640
        assert config.youtube_height == 315
        assert config.media_base_url == "https://cdn.example.com/media"

    def test_unknown_key_warning(self):
        """Test unknown keys are reported as warnings, not errors."""
        manager = ConfigurationManager()

        result = manager.load({"toolbar_theme": "dark"})

        assert result.is_valid
        assert len(result.warnings) == 1
        assert "toolbar_theme" in result.warnings[0]

    @pytest.mark.parametrize("data", [
        {"history_depth": 0},
        {"history_depth": "10"},
        {"unknown_tag_policy": "keep"},
        {"youtube_width": -1},
        {"max_image_bytes": True},
        {"media_root": "  "},
        {"database_url": ""},
    ])
    def test_invalid_values(self, data):
        """Test invalid values raise ConfigurationError with the validation result."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError) as exc_info:
            manager.load(data)

        assert exc_info.value.validation_result.errors
        assert manager.configuration == EditorConfig()

    def test_load_from_file(self):
        """Test loading settings from a JSON file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "editor.json"
            path.write_text(json.dumps({"excerpt_length": 80}), encoding="utf-8")

            manager = ConfigurationManager()
            manager.load(path)

            assert manager.configuration.excerpt_length == 80

    def test_missing_file(self):
        """Test a missing file raises ConfigurationError."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError):
            manager.load("/nonexistent/editor.json")

    def test_invalid_json_file(self):
        """Test a malformed file raises ConfigurationError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "editor.json"
            path.write_text("{not json", encoding="utf-8")

            with pytest.raises(ConfigurationError):
                ConfigurationManager().load(path)

    def test_non_object_rejected(self):
        """Test a JSON list is not a configuration."""
        with pytest.raises(ConfigurationError):
            ConfigurationManager().load([1, 2])


class TestEnvironmentOverrides:
    """Tests for BTAML_* environment variables."""

    def test_overrides_applied(self):
        """Test environment variables override loaded settings."""
        manager = ConfigurationManager()
        manager.load({"history_depth": 10})

        manager.apply_environment({
            "BTAML_HISTORY_DEPTH": "25",
            "BTAML_DATABASE_URL": "sqlite://",
            "BTAML_UNKNOWN_TAG_POLICY": "drop",
            "UNRELATED": "x",
        })

        config = manager.configuration
        assert config.history_depth == 25
        assert config.database_url == "sqlite://"
        assert config.unknown_tag_policy == UnknownTagPolicy.DROP

    def test_non_integer_override(self):
        """Test integer settings reject non-numeric overrides."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError):
            manager.apply_environment({"BTAML_MAX_IMAGE_BYTES": "five megabytes"})

    def test_load_config_helper(self):
        """Test load_config combines a source with the environment."""
        config = load_config({"media_prefix": "/uploads/"}, environ={"BTAML_MEDIA_ROOT": "/srv/media"})

        assert config.media_prefix == "uploads"
        assert config.media_root == "/srv/media"

    def test_load_config_without_source(self):
        """Test load_config returns defaults for an empty environment."""
        assert load_config(environ={}) == EditorConfig()


class TestConfigurationPersistence:
    """Tests for saving and exporting configuration."""

    def test_save_and_reload(self):
        """Test a saved configuration loads back unchanged."""
        with tempfile.TemporaryDirectory() as tmpdir:
            manager = ConfigurationManager()
            manager.load({"history_depth": 5, "unknown_tag_policy": "drop"})
            path = manager.save_to_file(Path(tmpdir) / "nested" / "editor.json")

            reloaded = ConfigurationManager()
            reloaded.load(path)

            assert reloaded.configuration == manager.configuration

    def test_save_without_path(self):
        """Test saving needs a path when none was loaded."""
        with pytest.raises(ConfigurationError):
            ConfigurationManager().save_to_file()

    def test_to_dict_export(self):
        """Test the exported dictionary is JSON-ready."""
        data = ConfigurationManager().to_dict()

        assert data["unknown_tag_policy"] == "unwrap"
        assert json.loads(json.dumps(data)) == data

    def test_reset_configuration(self):
        """Test reset restores defaults."""
        manager = ConfigurationManager()
        manager.load({"excerpt_length": 20})

        manager.reset()

        assert manager.configuration.excerpt_length == 150
        assert not manager.is_loaded


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_merge(self):
        """Test merging keeps errors and warnings from both results."""
        first = ValidationResult(is_valid=True)
        first.add_warning("w")
        second = ValidationResult(is_valid=True)
        second.add_error("e")

        merged = first.merge(second)

        assert not merged.is_valid
        assert merged.errors == ["e"]
        assert merged.warnings == ["w"]
