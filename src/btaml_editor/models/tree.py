"""Pure tree operations over immutable documents.

Paths address nodes by child indices from the document root. Every
function here returns a new Document and leaves its input untouched.
"""

from typing import Callable, List, Optional, Sequence, Tuple

from .document import Document, Node, normalize_inline, slice_inline, text_node
from .enums import NodeKind
from .exceptions import NotFound, SchemaViolation
from .schema import NON_EMPTY_KINDS, marks_allowed, validate_blocks, validate_document
from .selection import Path, Position, Selection

Leaf = Tuple[Path, Node]


def create_empty() -> Document:
    """Document with one empty paragraph. Never fails."""
    return Document.create_empty()


def node_at(doc: Document, path: Sequence[int]) -> Node:
    """
    Return the node at `path`.

    Raises:
        NotFound: If any index along the path does not exist.
    """
    if not path:
        raise NotFound("Empty path does not address a node", location="doc")
    children = doc.blocks
    node: Optional[Node] = None
    for depth, index in enumerate(path):
        if index < 0 or index >= len(children):
            raise NotFound(
                f"No child at index {index}",
                location=_describe(path[:depth + 1]),
            )
        node = children[index]
        children = node.children
    return node


def parent_kind(doc: Document, path: Sequence[int]) -> Optional[NodeKind]:
    """Kind of the node holding `path`, None when it is a root block."""
    if len(path) <= 1:
        return None
    return node_at(doc, path[:-1]).kind


def ancestors(doc: Document, path: Sequence[int]) -> List[Leaf]:
    """(path, node) pairs from the root block down to the parent of `path`."""
    return [(tuple(path[:depth]), node_at(doc, path[:depth])) for depth in range(1, len(path))]


def leaves(doc: Document) -> List[Leaf]:
    """All leaf blocks (textblocks and atomic nodes) in document order."""
    result: List[Leaf] = []

    def walk(children: Tuple[Node, ...], prefix: Path) -> None:
        for index, child in enumerate(children):
            path = prefix + (index,)
            if child.is_leaf_block:
                result.append((path, child))
            else:
                walk(child.children, path)

    walk(doc.blocks, ())
    return result


def leaves_in(doc: Document, selection: Selection) -> List[Leaf]:
    """Leaf blocks touched by a selection, in document order."""
    start, end = selection.start.path, selection.end.path
    return [(path, node) for path, node in leaves(doc) if start <= path <= end]


def resolve(doc: Document, position: Position) -> Node:
    """
    Return the leaf block a position points into.

    Raises:
        NotFound: If the path is invalid, does not address a leaf block,
            or the offset falls outside the block.
    """
    node = node_at(doc, position.path)
    if not node.is_leaf_block:
        raise NotFound(
            f"'{node.kind.value}' is not a cursor target",
            location=_describe(position.path),
        )
    limit = node.content_size if node.is_textblock else 0
    if position.offset < 0 or position.offset > limit:
        raise NotFound(
            f"Offset {position.offset} outside 0..{limit}",
            location=_describe(position.path),
        )
    return node


def resolve_selection(doc: Document, selection: Selection) -> None:
    resolve(doc, selection.anchor)
    resolve(doc, selection.head)


def start_of(doc: Document) -> Position:
    """Position at the very start of the document."""
    path, _ = leaves(doc)[0]
    return Position(path, 0)


def end_of(doc: Document) -> Position:
    path, node = leaves(doc)[-1]
    return Position(path, node.content_size)


def last_position_in(node: Node, path: Path) -> Position:
    """Position at the end of the last leaf block inside `node`."""
    while not node.is_leaf_block:
        path = path + (len(node.children) - 1,)
        node = node.children[-1]
    return Position(path, node.content_size)


def map_at(doc: Document, path: Sequence[int], fn: Callable[[Node], Sequence[Node]]) -> Document:
    """
    Replace the node at `path` with the nodes `fn` returns for it.

    Ancestors are rebuilt; every other subtree is shared with `doc`.
    """
    node_at(doc, path)
    blocks = _map_children(doc.blocks, tuple(path), fn)
    if not blocks:
        return create_empty()
    return Document(blocks=blocks)


def update_at(doc: Document, path: Sequence[int], fn: Callable[[Node], Node]) -> Document:
    return map_at(doc, path, lambda node: (fn(node),))


def replace_children(doc: Document, parent_path: Sequence[int], start: int, end: int,
                     nodes: Sequence[Node]) -> Document:
    """Replace children [start, end) of the node at `parent_path` (root when empty)."""
    parent_path = tuple(parent_path)
    if not parent_path:
        blocks = doc.blocks[:start] + tuple(nodes) + doc.blocks[end:]
        return Document(blocks=blocks) if blocks else create_empty()
    return update_at(
        doc,
        parent_path,
        lambda parent: parent.with_children(parent.children[:start] + tuple(nodes) + parent.children[end:]),
    )


def remove_paths(doc: Document, paths: Sequence[Path]) -> Document:
    """Remove the nodes at `paths`, then drop containers left empty."""
    for path in sorted(paths, reverse=True):
        doc = map_at(doc, path, lambda node: ())
    return prune_empty(doc)


def prune_empty(doc: Document) -> Document:
    """Drop lists, list items and blockquotes that have no children left."""

    def prune(children: Tuple[Node, ...]) -> Tuple[Node, ...]:
        result = []
        changed = False
        for child in children:
            if child.is_text or child.is_leaf_block:
                result.append(child)
                continue
            pruned = prune(child.children)
            if pruned is not child.children:
                child = child.with_children(pruned)
                changed = True
            if child.kind in NON_EMPTY_KINDS and not child.children:
                changed = True
                continue
            result.append(child)
        return tuple(result) if changed else children

    blocks = prune(doc.blocks)
    if blocks is doc.blocks:
        return doc
    return Document(blocks=blocks) if blocks else create_empty()


def delete_range(doc: Document, selection: Selection) -> Tuple[Document, Position]:
    """
    Delete the selected span.

    Content before the start and after the end of the span is joined
    into the start block. An atomic node at the start of the span is
    replaced by the remainder of the end block, or by an empty paragraph.

    Returns:
        The new document and the collapsed cursor where the span was.
    """
    resolve_selection(doc, selection)
    start, end = selection.start, selection.end
    if selection.is_collapsed:
        return doc, start

    touched = leaves_in(doc, selection)
    (first_path, first), (last_path, last) = touched[0], touched[-1]

    if first_path == last_path:
        merged = normalize_inline(slice_inline(first.children, 0, start.offset) + slice_inline(first.children, end.offset))
        return update_at(doc, first_path, lambda node: node.with_children(merged)), start

    if first.is_textblock:
        tail = slice_inline(last.children, end.offset) if last.is_textblock else ()
        head = slice_inline(first.children, 0, start.offset)
        if tail and not marks_allowed(first):
            tail = tuple(text_node(t.text) for t in tail)
        elif tail and not marks_allowed(last):
            # Line breaks only exist inside code blocks.
            tail = tuple(text_node(t.text.replace("\n", " ")) for t in tail)
        replacement = first.with_children(normalize_inline(head + tail))
        cursor = Position(first_path, start.offset)
    elif last.is_textblock:
        replacement = last.with_children(slice_inline(last.children, end.offset))
        cursor = Position(first_path, 0)
    else:
        replacement = Node(kind=NodeKind.PARAGRAPH)
        cursor = Position(first_path, 0)

    removed = [path for path, _ in touched[1:]]
    doc = update_at(doc, first_path, lambda node: replacement)
    return remove_paths(doc, removed), cursor


def insert_nodes(doc: Document, position: Position, nodes: Sequence[Node]) -> Tuple[Document, Position]:
    """
    Insert inline or block nodes at a cursor.

    Inline (text) nodes are spliced into the textblock at the cursor, or
    into a new paragraph after an atomic node. Block nodes split the
    textblock at the cursor; empty halves of the split are dropped.

    Raises:
        SchemaViolation: If inline and block nodes are mixed, or the
            block nodes are not allowed where the cursor sits.
    """
    leaf = resolve(doc, position)
    nodes = tuple(nodes)
    if not nodes:
        return doc, position

    inline = [node.is_text for node in nodes]
    if any(inline) and not all(inline):
        raise SchemaViolation("Cannot insert inline and block nodes together", location=_describe(position.path))

    parent_path, index = position.path[:-1], position.path[-1]

    if all(inline):
        if leaf.is_textblock:
            if not marks_allowed(leaf):
                nodes = tuple(text_node(node.text) for node in nodes)
            children = normalize_inline(
                slice_inline(leaf.children, 0, position.offset) + nodes + slice_inline(leaf.children, position.offset)
            )
            size = sum(len(node.text) for node in nodes)
            doc = update_at(doc, position.path, lambda node: node.with_children(children))
            return doc, Position(position.path, position.offset + size)
        block = Node(kind=NodeKind.PARAGRAPH, children=normalize_inline(nodes))
        doc = replace_children(doc, parent_path, index + 1, index + 1, (block,))
        return doc, Position(parent_path + (index + 1,), block.content_size)

    validate_blocks(nodes, parent_kind(doc, position.path))

    if leaf.is_textblock:
        size = leaf.content_size
        left = leaf.with_children(slice_inline(leaf.children, 0, position.offset))
        right = leaf.with_children(slice_inline(leaf.children, position.offset))
        before = (left,) if position.offset > 0 else ()
        after = (right,) if position.offset < size else ()
    else:
        before, after = (leaf,), ()

    doc = replace_children(doc, parent_path, index, index + 1, before + nodes + after)
    validate_document(doc)

    if after:
        return doc, Position(parent_path + (index + len(before) + len(nodes),), 0)
    last_index = index + len(before) + len(nodes) - 1
    return doc, last_position_in(nodes[-1], parent_path + (last_index,))


def replace_selection(doc: Document, selection: Selection, nodes: Sequence[Node]) -> Tuple[Document, Position]:
    """Delete the selected span, then insert `nodes` at the resulting cursor."""
    doc, cursor = delete_range(doc, selection)
    return insert_nodes(doc, cursor, nodes)


def replace_range(doc: Document, selection: Selection, nodes: Sequence[Node]) -> Document:
    """
    Return a new document with the selected span replaced by `nodes`.

    Raises:
        NotFound: If the selection does not resolve in `doc`.
        SchemaViolation: If the result would break containment rules.
    """
    new_doc, _ = replace_selection(doc, selection, nodes)
    return new_doc


def _map_children(children: Tuple[Node, ...], path: Path,
                  fn: Callable[[Node], Sequence[Node]]) -> Tuple[Node, ...]:
    index = path[0]
    node = children[index]
    if len(path) == 1:
        replacement = tuple(fn(node))
    else:
        replacement = (node.with_children(_map_children(node.children, path[1:], fn)),)
    return children[:index] + replacement + children[index + 1:]


def _describe(path: Sequence[int]) -> str:
    return "doc/" + "/".join(str(i) for i in path)
