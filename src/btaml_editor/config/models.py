"""Data models for editor configuration."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..models.enums import UnknownTagPolicy

MIB = 1024 * 1024


@dataclass
class EditorConfig:
    """
    Settings shared by editing sessions, the upload gateway and the store.

    Attributes:
        history_depth: Undo snapshots kept per session; None keeps all.
        unknown_tag_policy: What the HTML parser does with foreign tags.
        youtube_width: Default embed width in pixels.
        youtube_height: Default embed height in pixels.
        max_image_bytes: Upload size limit for images.
        max_video_bytes: Upload size limit for videos.
        media_root: Directory uploaded files are written under.
        media_base_url: Public URL prefix uploaded files are served from.
        media_prefix: Key prefix for uploaded objects.
        database_url: SQLAlchemy URL for the article store; None uses the
            POSTGRES_* environment variables.
        excerpt_length: Characters kept in generated article excerpts.
    """
    history_depth: Optional[int] = None
    unknown_tag_policy: UnknownTagPolicy = UnknownTagPolicy.UNWRAP
    youtube_width: int = 560
    youtube_height: int = 315
    max_image_bytes: int = 5 * MIB
    max_video_bytes: int = 50 * MIB
    media_root: str = "media"
    media_base_url: str = "/media"
    media_prefix: str = "articles"
    database_url: Optional[str] = None
    excerpt_length: int = 150

    def to_dict(self) -> Dict[str, Any]:
        return {
            "history_depth": self.history_depth,
            "unknown_tag_policy": self.unknown_tag_policy.value,
            "youtube_width": self.youtube_width,
            "youtube_height": self.youtube_height,
            "max_image_bytes": self.max_image_bytes,
            "max_video_bytes": self.max_video_bytes,
            "media_root": self.media_root,
            "media_base_url": self.media_base_url,
            "media_prefix": self.media_prefix,
            "database_url": self.database_url,
            "excerpt_length": self.excerpt_length,
        }


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result
