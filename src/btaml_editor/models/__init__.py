"""Document model, schema and tree operations for the BTAML editor."""

from .enums import (
    ArticleCategory,
    ArticleStatus,
    MarkKind,
    MediaKind,
    NodeKind,
    TextAlign,
    UnknownTagPolicy,
)
from .exceptions import (
    EditorError,
    InvalidArgument,
    NotFound,
    SchemaViolation,
    UnknownCommand,
    UploadError,
)
from .document import Document, Mark, Node, heading, paragraph, text_node
from .selection import Path, Position, Selection
from .schema import validate_document, validate_node
from .tree import create_empty, node_at, replace_range

__all__ = [
    # Enums
    "ArticleCategory",
    "ArticleStatus",
    "MarkKind",
    "MediaKind",
    "NodeKind",
    "TextAlign",
    "UnknownTagPolicy",
    # Errors
    "EditorError",
    "InvalidArgument",
    "NotFound",
    "SchemaViolation",
    "UnknownCommand",
    "UploadError",
    # Tree
    "Document",
    "Mark",
    "Node",
    "heading",
    "paragraph",
    "text_node",
    "Path",
    "Position",
    "Selection",
    "validate_document",
    "validate_node",
    "create_empty",
    "node_at",
    "replace_range",
]
