"""Containment and attribute rules for the document tree."""

from typing import Dict, FrozenSet, Iterable, Optional

from .document import Document, Node
from .enums import (
    ALIGNABLE_KINDS,
    ATOMIC_KINDS,
    BLOCK_KINDS,
    VALUE_MARKS,
    MarkKind,
    NodeKind,
    TextAlign,
)
from .exceptions import SchemaViolation

_INLINE: FrozenSet[NodeKind] = frozenset({NodeKind.TEXT})
_NOTHING: FrozenSet[NodeKind] = frozenset()

# Kinds each node kind may hold as children. None stands for the document root.
CONTENT_RULES: Dict[Optional[NodeKind], FrozenSet[NodeKind]] = {
    None: BLOCK_KINDS,
    NodeKind.PARAGRAPH: _INLINE,
    NodeKind.HEADING: _INLINE,
    NodeKind.CODE_BLOCK: _INLINE,
    NodeKind.BULLET_LIST: frozenset({NodeKind.LIST_ITEM}),
    NodeKind.ORDERED_LIST: frozenset({NodeKind.LIST_ITEM}),
    NodeKind.LIST_ITEM: BLOCK_KINDS,
    NodeKind.BLOCKQUOTE: BLOCK_KINDS,
    NodeKind.IMAGE: _NOTHING,
    NodeKind.VIDEO: _NOTHING,
    NodeKind.YOUTUBE: _NOTHING,
    NodeKind.TEXT: _NOTHING,
}

# Containers that must never be empty.
NON_EMPTY_KINDS = frozenset({
    NodeKind.BULLET_LIST,
    NodeKind.ORDERED_LIST,
    NodeKind.LIST_ITEM,
    NodeKind.BLOCKQUOTE,
})

HEADING_LEVELS = range(1, 7)
ALIGN_VALUES = frozenset(a.value for a in TextAlign)


def allows(parent: Optional[NodeKind], child: NodeKind) -> bool:
    """Whether a `parent` node (None for the root) may hold a `child` kind."""
    return child in CONTENT_RULES[parent]


def marks_allowed(block: Node) -> bool:
    """Code blocks hold plain text only."""
    return block.kind != NodeKind.CODE_BLOCK


def validate_node(node: Node, parent: Optional[NodeKind] = None, location: str = "doc") -> None:
    """
    Check a node and its subtree against the schema.

    Args:
        node: Node to check.
        parent: Kind of the node's parent, None for the document root.
        location: Path description used in error messages.

    Raises:
        SchemaViolation: On the first rule the subtree breaks.
    """
    if not allows(parent, node.kind):
        parent_name = parent.value if parent else "document"
        raise SchemaViolation(
            message=f"'{node.kind.value}' is not allowed inside '{parent_name}'",
            location=location,
        )

    if node.is_text:
        if not node.text:
            raise SchemaViolation("Text nodes must not be empty", location=location)
        _validate_marks(node, location)
        return

    if node.marks:
        raise SchemaViolation(
            f"Marks are only legal on text nodes, found on '{node.kind.value}'",
            location=location,
        )

    if node.kind in ATOMIC_KINDS and node.children:
        raise SchemaViolation(f"Atomic node '{node.kind.value}' cannot have children", location=location)

    if node.kind in NON_EMPTY_KINDS and not node.children:
        raise SchemaViolation(f"'{node.kind.value}' must not be empty", location=location)

    _validate_attrs(node, location)

    for index, child in enumerate(node.children):
        child_location = f"{location}/{index}"
        if child.is_text and not marks_allowed(node) and child.marks:
            raise SchemaViolation("Code blocks cannot carry marks", location=child_location)
        validate_node(child, node.kind, child_location)


def validate_document(doc: Document) -> None:
    """Check every block of a document. Raises SchemaViolation."""
    for index, block in enumerate(doc.blocks):
        validate_node(block, None, f"doc/{index}")


def validate_blocks(blocks: Iterable[Node], parent: Optional[NodeKind]) -> None:
    for index, block in enumerate(blocks):
        validate_node(block, parent, f"insert/{index}")


def _validate_marks(node: Node, location: str) -> None:
    kinds = [mark.kind for mark in node.marks]
    if len(kinds) != len(set(kinds)):
        raise SchemaViolation("A text run may carry each mark kind only once", location=location)
    for mark in node.marks:
        if mark.kind in VALUE_MARKS and mark.kind != MarkKind.HIGHLIGHT and not mark.value:
            raise SchemaViolation(f"Mark '{mark.kind.value}' requires a value", location=location)
        if mark.kind not in VALUE_MARKS and mark.value is not None:
            raise SchemaViolation(f"Mark '{mark.kind.value}' takes no value", location=location)


def _validate_attrs(node: Node, location: str) -> None:
    if node.kind == NodeKind.HEADING and node.attr("level") not in HEADING_LEVELS:
        raise SchemaViolation(f"Heading level must be 1-6, got {node.attr('level')!r}", location=location)

    align = node.attr("textAlign")
    if align is not None:
        if node.kind not in ALIGNABLE_KINDS:
            raise SchemaViolation(f"'{node.kind.value}' cannot carry textAlign", location=location)
        if align not in ALIGN_VALUES:
            raise SchemaViolation(f"Unknown alignment {align!r}", location=location)

    if node.kind in ATOMIC_KINDS and not node.attr("src"):
        raise SchemaViolation(f"'{node.kind.value}' requires a src attribute", location=location)
