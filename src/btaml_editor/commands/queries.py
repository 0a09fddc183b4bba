"""Read-only queries used by the toolbar to reflect formatting state."""

from typing import Any, Dict, Optional, Tuple, Union

from ..models.document import Mark, find_mark
from ..models.enums import ALIGNABLE_KINDS, MarkKind, NodeKind
from ..models.tree import ancestors, leaves_in, node_at, resolve
from .marks import cursor_marks, mark_ranges, range_has_mark
from .state import EditorState

Query = Union[MarkKind, NodeKind, str, None]


def is_active(state: EditorState, name: Query = None, attrs: Optional[Dict[str, Any]] = None) -> bool:
    """
    Whether a mark or node kind is active over the selection.

    Args:
        state: Editor state to inspect.
        name: A MarkKind, a NodeKind, or the string value of either. None
            checks `attrs` alone against the touched paragraphs and headings,
            as in ``is_active(state, attrs={"textAlign": "center"})``.
        attrs: Attributes the mark value or node must also match.

    Returns:
        True for a collapsed cursor when the mark applies at the cursor or
        the cursor's block (or an ancestor) matches; for a range, when every
        selected character or block matches. Unknown names are never active.
    """
    attrs = attrs or {}
    if name is None:
        return _attrs_active(state, attrs)
    kind = _parse_query(name)
    if isinstance(kind, MarkKind):
        return _mark_active(state, kind, attrs)
    if isinstance(kind, NodeKind):
        return _node_active(state, kind, attrs)
    return False


def active_marks(state: EditorState) -> Tuple[Mark, ...]:
    """Marks in effect at the cursor, or shared by every selected character."""
    if state.selection.is_collapsed:
        return cursor_marks(state)
    ranges = mark_ranges(state)
    return tuple(
        Mark(kind, _common_value(state, ranges, kind))
        for kind in MarkKind
        if range_has_mark(state, ranges, kind)
    )


def heading_level(state: EditorState) -> int:
    """Level of the heading at the cursor head, 0 when it is not a heading."""
    node = resolve(state.doc, state.selection.head)
    return node.attr("level") if node.kind == NodeKind.HEADING else 0


def _parse_query(name: Query):
    if isinstance(name, (MarkKind, NodeKind)):
        return name
    for enum in (MarkKind, NodeKind):
        try:
            return enum(name)
        except ValueError:
            continue
    return None


def _mark_active(state: EditorState, kind: MarkKind, attrs: Dict[str, Any]) -> bool:
    value = attrs.get("value", attrs.get("href", attrs.get("color")))
    if state.selection.is_collapsed:
        mark = find_mark(cursor_marks(state), kind)
        return mark is not None and (value is None or mark.value == value)
    return range_has_mark(state, mark_ranges(state), kind, value)


def _node_active(state: EditorState, kind: NodeKind, attrs: Dict[str, Any]) -> bool:
    touched = leaves_in(state.doc, state.selection)
    for path, leaf in touched:
        chain = [node for _, node in ancestors(state.doc, path)] + [leaf]
        if not any(node.kind == kind and _matches(node, attrs) for node in chain):
            return False
    return bool(touched)


def _attrs_active(state: EditorState, attrs: Dict[str, Any]) -> bool:
    blocks = [node for _, node in leaves_in(state.doc, state.selection) if node.kind in ALIGNABLE_KINDS]
    return bool(blocks) and all(_matches(node, attrs) for node in blocks)


def _matches(node, attrs: Dict[str, Any]) -> bool:
    return all(node.attr(key) == value for key, value in attrs.items())


def _common_value(state: EditorState, ranges, kind: MarkKind) -> Optional[str]:
    values = set()
    for path, lo, hi in ranges:
        pos = 0
        for child in node_at(state.doc, path).children:
            child_lo, child_hi = pos, pos + len(child.text)
            pos = child_hi
            if child_hi > lo and child_lo < hi:
                values.add(find_mark(child.marks, kind).value)
    return values.pop() if len(values) == 1 else None
