"""Block commands: paragraph, heading, code block, alignment, blockquote."""

import re
from typing import Any, Dict, List, Optional, Tuple

from ..models.document import Node, normalize_inline, text_node
from ..models.enums import ALIGNABLE_KINDS, LIST_KINDS, NodeKind, TextAlign
from ..models.exceptions import InvalidArgument
from ..models.schema import HEADING_LEVELS
from ..models.selection import Path
from ..models.tree import Leaf, ancestors, leaves_in, node_at, replace_children, update_at
from .state import EditorState

_LANGUAGE_RE = re.compile(r"^[A-Za-z0-9_+#.-]+$")


def touched_textblocks(state: EditorState) -> List[Leaf]:
    return [(path, node) for path, node in leaves_in(state.doc, state.selection) if node.is_textblock]


def set_block_type(state: EditorState, kind: NodeKind, attrs: Optional[Dict[str, Any]] = None) -> Optional[EditorState]:
    """
    Convert every textblock touched by the selection to `kind`.

    Inline content is preserved. Marks are dropped when converting to a code
    block, and alignment is kept when the target kind accepts it.
    """
    attrs = attrs or {}
    blocks = touched_textblocks(state)
    if not blocks:
        return None
    doc = state.doc
    for path, _ in blocks:
        doc = update_at(doc, path, lambda node: convert_block(node, kind, attrs))
    if doc == state.doc:
        return None
    return EditorState(doc=doc, selection=state.selection)


def convert_block(node: Node, kind: NodeKind, attrs: Dict[str, Any]) -> Node:
    children = node.children
    if kind == NodeKind.CODE_BLOCK:
        children = tuple(text_node(child.text) for child in children)
    elif node.kind == NodeKind.CODE_BLOCK:
        children = tuple(text_node(child.text.replace("\n", " ")) for child in children)

    new_attrs = {}
    if kind in ALIGNABLE_KINDS and node.attr("textAlign"):
        new_attrs["textAlign"] = node.attr("textAlign")
    new_attrs.update({key: value for key, value in attrs.items() if value is not None})
    return Node(kind=kind, attrs=new_attrs, children=normalize_inline(children))


def set_paragraph(state: EditorState) -> Optional[EditorState]:
    return set_block_type(state, NodeKind.PARAGRAPH)


def set_heading(state: EditorState, level: int) -> Optional[EditorState]:
    """
    Convert touched blocks to headings of `level`.

    Raises:
        InvalidArgument: If level is not an integer from 1 to 6.
    """
    return set_block_type(state, NodeKind.HEADING, {"level": validate_level(level)})


def toggle_heading(state: EditorState, level: int) -> Optional[EditorState]:
    level = validate_level(level)
    blocks = touched_textblocks(state)
    if blocks and all(node.kind == NodeKind.HEADING and node.attr("level") == level for _, node in blocks):
        return set_paragraph(state)
    return set_heading(state, level)


def toggle_code_block(state: EditorState, language: Optional[str] = None) -> Optional[EditorState]:
    if language is not None and (not isinstance(language, str) or not _LANGUAGE_RE.match(language)):
        raise InvalidArgument(f"Invalid code block language: {language!r}")
    blocks = touched_textblocks(state)
    if blocks and all(node.kind == NodeKind.CODE_BLOCK for _, node in blocks):
        return set_paragraph(state)
    return set_block_type(state, NodeKind.CODE_BLOCK, {"language": language})


def set_text_align(state: EditorState, direction) -> Optional[EditorState]:
    """
    Set the alignment of touched paragraphs and headings.

    Raises:
        InvalidArgument: If direction is not left, center, right or justify.
    """
    try:
        align = TextAlign(direction.value if isinstance(direction, TextAlign) else direction)
    except ValueError:
        raise InvalidArgument(f"Unknown alignment: {direction!r}")
    return _align(state, align.value)


def unset_text_align(state: EditorState) -> Optional[EditorState]:
    return _align(state, None)


def _align(state: EditorState, value: Optional[str]) -> Optional[EditorState]:
    doc = state.doc
    for path, node in touched_textblocks(state):
        if node.kind in ALIGNABLE_KINDS:
            doc = update_at(doc, path, lambda n: n.with_attrs(textAlign=value))
    if doc == state.doc:
        return None
    return EditorState(doc=doc, selection=state.selection)


def validate_level(level) -> int:
    if isinstance(level, bool) or not isinstance(level, int) or level not in HEADING_LEVELS:
        raise InvalidArgument(f"Heading level must be an integer from 1 to 6, got {level!r}")
    return level


def block_range(state: EditorState) -> Tuple[Path, int, int]:
    """
    Sibling range covering the selection: (parent path, start, end).

    The range sits at the deepest node holding both ends of the selection,
    widened past list items so the range never consists of bare items.
    """
    doc = state.doc
    start, end = state.selection.start.path, state.selection.end.path
    depth = 0
    limit = min(len(start), len(end)) - 1
    while depth < limit and start[depth] == end[depth]:
        depth += 1
    parent, lo, hi = start[:depth], start[depth], end[depth] + 1
    while parent and node_at(doc, parent).kind in LIST_KINDS:
        parent, lo, hi = parent[:-1], parent[-1], parent[-1] + 1
    return parent, lo, hi


def toggle_blockquote(state: EditorState) -> Optional[EditorState]:
    """Lift the selection out of its blockquotes, or wrap it in a new one."""
    touched = leaves_in(state.doc, state.selection)
    quotes = set()
    for path, _ in touched:
        nearest = [p for p, node in ancestors(state.doc, path) if node.kind == NodeKind.BLOCKQUOTE]
        if not nearest:
            break
        quotes.add(nearest[-1])
    else:
        doc = state.doc
        for path in sorted(quotes, reverse=True):
            quote = node_at(doc, path)
            doc = replace_children(doc, path[:-1], path[-1], path[-1] + 1, quote.children)
        return state.remap(doc)

    parent, lo, hi = block_range(state)
    siblings = node_at(state.doc, parent).children if parent else state.doc.blocks
    quote = Node(kind=NodeKind.BLOCKQUOTE, children=siblings[lo:hi])
    return state.remap(replace_children(state.doc, parent, lo, hi, (quote,)))
