"""Typing commands: insert text, delete, split blocks."""

import re
from typing import Optional

from ..models.document import Node, marks_at, slice_inline, text_node
from ..models.enums import MarkKind, NodeKind
from ..models.exceptions import InvalidArgument
from ..models.selection import Position
from ..models.tree import (
    delete_range,
    insert_nodes,
    node_at,
    parent_kind,
    replace_children,
    resolve,
    update_at,
)
from .state import EditorState

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_LINE_BREAKS = str.maketrans({"\r": " ", "\n": " ", "\t": " "})


def insert_text(state: EditorState, text: str) -> Optional[EditorState]:
    """
    Replace the selection with `text`.

    The text carries the stored marks when present, otherwise the marks in
    effect at the start of the selection. Links do not extend to typed text.
    """
    if not isinstance(text, str):
        raise InvalidArgument(f"text must be a string, got {type(text).__name__}")
    selection = state.selection
    if not text and selection.is_collapsed:
        return None

    marks = state.stored_marks
    if marks is None:
        leaf = resolve(state.doc, selection.start)
        if leaf.is_textblock:
            offset = selection.start.offset if selection.is_collapsed else selection.start.offset + 1
            marks = tuple(m for m in marks_at(leaf.children, offset) if m.kind != MarkKind.LINK)
        else:
            marks = ()

    text = _CONTROL_CHARS.sub("", text)
    doc, cursor = delete_range(state.doc, selection)
    if not text:
        return state.with_doc(doc, cursor)

    target = resolve(doc, cursor)
    if target.kind != NodeKind.CODE_BLOCK:
        text = text.translate(_LINE_BREAKS)
    doc, cursor = insert_nodes(doc, cursor, (text_node(text, marks),))
    return state.with_doc(doc, cursor)


def delete_selection(state: EditorState) -> Optional[EditorState]:
    """Delete the selected span. No-op on a collapsed cursor."""
    if state.selection.is_collapsed:
        return None
    doc, cursor = delete_range(state.doc, state.selection)
    return state.with_doc(doc, cursor)


def split_block(state: EditorState) -> Optional[EditorState]:
    """
    Split the block at the cursor, as the Enter key does.

    Inside a code block a newline is inserted instead. Inside a list item
    the item is split; an empty item on its own leaves the list.
    """
    doc, cursor = delete_range(state.doc, state.selection)
    leaf = resolve(doc, cursor)
    path, offset = cursor.path, cursor.offset
    parent_path, index = path[:-1], path[-1]

    if leaf.is_atomic:
        doc = replace_children(doc, parent_path, index + 1, index + 1, (Node(kind=NodeKind.PARAGRAPH),))
        return state.with_doc(doc, Position(parent_path + (index + 1,), 0))

    if leaf.kind == NodeKind.CODE_BLOCK:
        doc, cursor = insert_nodes(doc, cursor, (text_node("\n"),))
        return state.with_doc(doc, cursor)

    left = leaf.with_children(slice_inline(leaf.children, 0, offset))
    right = leaf.with_children(slice_inline(leaf.children, offset))
    if offset == leaf.content_size and leaf.kind == NodeKind.HEADING:
        align = leaf.attr("textAlign")
        right = Node(kind=NodeKind.PARAGRAPH, attrs={"textAlign": align} if align else {})

    if parent_kind(doc, path) == NodeKind.LIST_ITEM:
        return _split_list_item(state, doc, path, leaf, left, right)

    doc = replace_children(doc, parent_path, index, index + 1, (left, right))
    return state.with_doc(doc, Position(parent_path + (index + 1,), 0))


def _split_list_item(state: EditorState, doc, path, leaf: Node, left: Node, right: Node) -> EditorState:
    item_path, child_index = path[:-1], path[-1]
    list_path, item_index = item_path[:-1], item_path[-1]
    item = node_at(doc, item_path)
    list_node = node_at(doc, list_path)

    if leaf.content_size == 0 and len(item.children) == 1:
        # Enter on an empty item leaves the list.
        before = list_node.children[:item_index]
        after = list_node.children[item_index + 1:]
        replacement = []
        if before:
            replacement.append(list_node.with_children(before))
        replacement.append(Node(kind=NodeKind.PARAGRAPH))
        if after:
            replacement.append(list_node.with_children(after))
        outer_path, list_index = list_path[:-1], list_path[-1]
        doc = replace_children(doc, outer_path, list_index, list_index + 1, replacement)
        paragraph_index = list_index + (1 if before else 0)
        return state.with_doc(doc, Position(outer_path + (paragraph_index,), 0))

    first = item.with_children(item.children[:child_index] + (left,))
    second = item.with_children((right,) + item.children[child_index + 1:])
    doc = update_at(
        doc,
        list_path,
        lambda node: node.with_children(node.children[:item_index] + (first, second) + node.children[item_index + 1:]),
    )
    return state.with_doc(doc, Position(list_path + (item_index + 1, 0), 0))


def select_all(state: EditorState) -> Optional[EditorState]:
    selected = state.select_all()
    return None if selected.selection == state.selection else selected
