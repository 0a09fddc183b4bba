"""Enumerations for the BTAML editor."""

from enum import Enum


class NodeKind(Enum):
    """Closed set of node kinds in the document tree."""
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BULLET_LIST = "bulletList"
    ORDERED_LIST = "orderedList"
    LIST_ITEM = "listItem"
    BLOCKQUOTE = "blockquote"
    CODE_BLOCK = "codeBlock"
    IMAGE = "image"
    VIDEO = "video"
    YOUTUBE = "youtube"
    TEXT = "text"


class MarkKind(Enum):
    """Inline style annotations.

    Declaration order is the canonical nesting order used when marks are
    serialized, outermost first.
    """
    LINK = "link"
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKE = "strike"
    SUBSCRIPT = "subscript"
    SUPERSCRIPT = "superscript"
    CODE = "code"
    TEXT_COLOR = "textColor"
    FONT_FAMILY = "fontFamily"
    HIGHLIGHT = "highlight"


class TextAlign(Enum):
    """Block-level text alignment."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"


class MediaKind(Enum):
    """Media kinds accepted by the upload gateway."""
    IMAGE = "image"
    VIDEO = "video"


class UnknownTagPolicy(Enum):
    """What the HTML deserializer does with tags outside the schema."""
    UNWRAP = "unwrap"
    DROP = "drop"


class ArticleStatus(Enum):
    """Publication status of an article."""
    DRAFT = "draft"
    PUBLISHED = "published"


class ArticleCategory(Enum):
    """Site sections an article belongs to."""
    AFRICA = "africa"
    BUSINESS = "business"
    SCHOLARSHIP = "scholarship"
    SECURITY = "security"


BLOCK_KINDS = frozenset({
    NodeKind.PARAGRAPH,
    NodeKind.HEADING,
    NodeKind.BULLET_LIST,
    NodeKind.ORDERED_LIST,
    NodeKind.BLOCKQUOTE,
    NodeKind.CODE_BLOCK,
    NodeKind.IMAGE,
    NodeKind.VIDEO,
    NodeKind.YOUTUBE,
})

TEXTBLOCK_KINDS = frozenset({NodeKind.PARAGRAPH, NodeKind.HEADING, NodeKind.CODE_BLOCK})

ATOMIC_KINDS = frozenset({NodeKind.IMAGE, NodeKind.VIDEO, NodeKind.YOUTUBE})

LIST_KINDS = frozenset({NodeKind.BULLET_LIST, NodeKind.ORDERED_LIST})

ALIGNABLE_KINDS = frozenset({NodeKind.PARAGRAPH, NodeKind.HEADING})

VALUE_MARKS = frozenset({
    MarkKind.LINK,
    MarkKind.TEXT_COLOR,
    MarkKind.FONT_FAMILY,
    MarkKind.HIGHLIGHT,
})
