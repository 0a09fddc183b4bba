"""
BTAML Editor

A structured rich-text document model, command engine and HTML serializer
for BTAML Universe articles.
"""

__version__ = "0.1.0"

# Export main components
from .models import (
    Document,
    Mark,
    Node,
    Position,
    Selection,
    MarkKind,
    NodeKind,
    TextAlign,
    MediaKind,
    UnknownTagPolicy,
    ArticleCategory,
    ArticleStatus,
    EditorError,
    InvalidArgument,
    NotFound,
    SchemaViolation,
    UnknownCommand,
    UploadError,
    create_empty,
    node_at,
    replace_range,
)
from .commands import (
    Command,
    CommandName,
    CommandRegistry,
    EditorState,
    create_default_registry,
    is_active,
    normalize_youtube_url,
)
from .serialization import (
    DocumentSerializer,
    HtmlDeserializer,
    HtmlSerializer,
    ParseReport,
    deserialize,
    serialize,
)
from .session import EditorSession, EditorSessionManager, History, ToolbarController
from .interfaces import Article, IArticleStore, IMediaUploadGateway
from .storage import DatabaseManager, LocalMediaUploadGateway, SqlArticleStore
from .config import ConfigurationError, ConfigurationManager, EditorConfig, ValidationResult, load_config

__all__ = [
    "Document",
    "Mark",
    "Node",
    "Position",
    "Selection",
    "MarkKind",
    "NodeKind",
    "TextAlign",
    "MediaKind",
    "UnknownTagPolicy",
    "ArticleCategory",
    "ArticleStatus",
    "EditorError",
    "InvalidArgument",
    "NotFound",
    "SchemaViolation",
    "UnknownCommand",
    "UploadError",
    "create_empty",
    "node_at",
    "replace_range",
    "Command",
    "CommandName",
    "CommandRegistry",
    "EditorState",
    "create_default_registry",
    "is_active",
    "normalize_youtube_url",
    "DocumentSerializer",
    "HtmlDeserializer",
    "HtmlSerializer",
    "ParseReport",
    "deserialize",
    "serialize",
    "EditorSession",
    "EditorSessionManager",
    "History",
    "ToolbarController",
    "Article",
    "IArticleStore",
    "IMediaUploadGateway",
    "DatabaseManager",
    "LocalMediaUploadGateway",
    "SqlArticleStore",
    "ConfigurationError",
    "ConfigurationManager",
    "EditorConfig",
    "ValidationResult",
    "load_config",
]
