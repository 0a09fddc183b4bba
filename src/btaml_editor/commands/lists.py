"""List commands: wrap, unwrap and convert bullet and ordered lists."""

from typing import Dict, List, Optional, Tuple

from ..models.document import Node
from ..models.enums import LIST_KINDS, NodeKind
from ..models.selection import Path
from ..models.tree import ancestors, leaves_in, node_at, replace_children, update_at
from .blocks import block_range
from .state import EditorState


def toggle_bullet_list(state: EditorState) -> Optional[EditorState]:
    return toggle_list(state, NodeKind.BULLET_LIST)


def toggle_ordered_list(state: EditorState) -> Optional[EditorState]:
    return toggle_list(state, NodeKind.ORDERED_LIST)


def toggle_list(state: EditorState, kind: NodeKind) -> Optional[EditorState]:
    """
    Toggle a list of `kind` around the selected blocks.

    When every selected block already sits in a list of `kind`, the
    selected items are lifted out of it. When they sit in lists of the
    other kind, those lists are converted. Otherwise the selected blocks
    are wrapped, one list item per block.
    """
    nearest = _nearest_lists(state)
    if nearest is None:
        return state.remap(_wrap(state, kind))
    if all(node_at(state.doc, list_path).kind == kind for list_path in nearest):
        return state.remap(_unwrap(state, nearest))
    doc = state.doc
    for list_path in nearest:
        doc = update_at(doc, list_path, lambda node: retype_list(node, kind))
    return state.remap(doc)


def retype_list(node: Node, kind: NodeKind) -> Node:
    if node.kind == kind:
        return node
    attrs = dict(node.attrs) if kind == NodeKind.ORDERED_LIST else {}
    return Node(kind=kind, attrs=attrs, children=node.children)


def _nearest_lists(state: EditorState) -> Optional[Dict[Path, List[int]]]:
    """Selected item indices per nearest enclosing list, or None if a block is outside any list."""
    found: Dict[Path, List[int]] = {}
    for path, _ in leaves_in(state.doc, state.selection):
        lists = [p for p, node in ancestors(state.doc, path) if node.kind in LIST_KINDS]
        if not lists:
            return None
        list_path = lists[-1]
        found.setdefault(list_path, []).append(path[len(list_path)])
    return found


def _unwrap(state: EditorState, nearest: Dict[Path, List[int]]):
    doc = state.doc
    for list_path in sorted(nearest, reverse=True):
        list_node = node_at(doc, list_path)
        lo, hi = min(nearest[list_path]), max(nearest[list_path]) + 1
        replacement: Tuple[Node, ...] = ()
        if lo > 0:
            replacement += (list_node.with_children(list_node.children[:lo]),)
        for item in list_node.children[lo:hi]:
            replacement += item.children
        if hi < len(list_node.children):
            replacement += (list_node.with_children(list_node.children[hi:]),)
        doc = replace_children(doc, list_path[:-1], list_path[-1], list_path[-1] + 1, replacement)
    return doc


def _wrap(state: EditorState, kind: NodeKind):
    parent, lo, hi = block_range(state)
    siblings = node_at(state.doc, parent).children if parent else state.doc.blocks
    items: Tuple[Node, ...] = ()
    for block in siblings[lo:hi]:
        if block.kind in LIST_KINDS:
            items += block.children
        else:
            items += (Node(kind=NodeKind.LIST_ITEM, children=(block,)),)
    return replace_children(state.doc, parent, lo, hi, (Node(kind=kind, children=items),))
