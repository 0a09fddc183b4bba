"""Plain text extraction and article excerpts."""

from ..models.document import Document

DEFAULT_EXCERPT_LENGTH = 150


def to_plain_text(doc: Document) -> str:
    """Text of every leaf block, one per line; media contribute nothing."""
    lines = []
    for node in doc.depth_first():
        if node.is_textblock:
            lines.append(node.text_content())
    return "\n".join(lines)


def generate_excerpt(doc: Document, length: int = DEFAULT_EXCERPT_LENGTH) -> str:
    """
    Short summary of an article body.

    Whitespace is collapsed, and text longer than `length` is cut and
    followed by "...".
    """
    text = " ".join(to_plain_text(doc).split())
    if len(text) <= length:
        return text
    return text[:length] + "..."
