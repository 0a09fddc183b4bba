"""Exceptions raised by the document model and command engine."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class EditorError(Exception):
    """
    Base exception for editing errors.

    All editing failures are local and recoverable: the session that raised
    one keeps its previous document and selection.

    Attributes:
        message: Human-readable error description.
        location: Where in the document the error applies (a node path).
        details: Additional error details.
    """
    message: str
    location: Optional[str] = None
    details: Optional[dict] = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.location:
            return f"{self.message} | Location: {self.location}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "location": self.location,
            "details": self.details,
        }


@dataclass
class SchemaViolation(EditorError):
    """A tree mutation would break the containment rules."""


@dataclass
class InvalidArgument(EditorError):
    """A command parameter is outside its valid domain."""


@dataclass
class UnknownCommand(InvalidArgument):
    """A command name does not exist in the registry."""


@dataclass
class NotFound(EditorError):
    """A referenced path or position does not exist in the document."""


@dataclass
class UploadError(EditorError):
    """
    Raised by a media upload gateway.

    The pending insert is abandoned and no node is added.
    """

    def user_message(self) -> str:
        """Short message suitable for showing to the person uploading."""
        return self.details.get("user_message", "Failed to upload media")
