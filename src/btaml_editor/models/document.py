"""Document tree data models for the BTAML editor.

Nodes are immutable. Every operation that changes content returns new
nodes and shares untouched subtrees with the previous tree.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .enums import ATOMIC_KINDS, TEXTBLOCK_KINDS, MarkKind, NodeKind
from .exceptions import SchemaViolation

_MARK_ORDER = {kind: index for index, kind in enumerate(MarkKind)}


@dataclass(frozen=True)
class Mark:
    """
    Inline style annotation carried by a text node.

    `value` holds the href of a link, the color of a text color or
    highlight, and the family of a font family mark.
    """
    kind: MarkKind
    value: Optional[str] = None

    @property
    def rank(self) -> int:
        """Position of this mark in the canonical nesting order."""
        return _MARK_ORDER[self.kind]


def normalize_marks(marks: Iterable[Mark]) -> Tuple[Mark, ...]:
    """Sort marks canonically, keeping the last mark given for each kind."""
    by_kind: Dict[MarkKind, Mark] = {}
    for mark in marks:
        by_kind[mark.kind] = mark
    return tuple(sorted(by_kind.values(), key=lambda m: m.rank))


def add_mark(marks: Tuple[Mark, ...], mark: Mark) -> Tuple[Mark, ...]:
    """Return `marks` with `mark` added, replacing any mark of the same kind."""
    return normalize_marks(m for m in marks + (mark,))


def remove_mark(marks: Tuple[Mark, ...], kind: MarkKind) -> Tuple[Mark, ...]:
    """Return `marks` without any mark of `kind`."""
    return tuple(m for m in marks if m.kind != kind)


def find_mark(marks: Iterable[Mark], kind: MarkKind) -> Optional[Mark]:
    """Return the mark of `kind` in `marks`, if present."""
    for mark in marks:
        if mark.kind == kind:
            return mark
    return None


@dataclass(frozen=True)
class Node:
    """
    A typed element of the document tree.

    Text nodes carry `text` and `marks`; every other kind carries `attrs`
    and `children`. Attribute dictionaries are never mutated after a node
    is built.
    """
    kind: NodeKind
    attrs: Dict[str, Any] = field(default_factory=dict)
    children: Tuple["Node", ...] = ()
    text: str = ""
    marks: Tuple[Mark, ...] = ()

    @property
    def is_text(self) -> bool:
        return self.kind == NodeKind.TEXT

    @property
    def is_textblock(self) -> bool:
        return self.kind in TEXTBLOCK_KINDS

    @property
    def is_atomic(self) -> bool:
        return self.kind in ATOMIC_KINDS

    @property
    def is_leaf_block(self) -> bool:
        """Textblocks and atomic nodes are the blocks a cursor can sit in."""
        return self.is_textblock or self.is_atomic

    @property
    def content_size(self) -> int:
        """Number of characters addressable inside a textblock."""
        if self.is_text:
            return len(self.text)
        if self.is_textblock:
            return sum(len(child.text) for child in self.children)
        return 0

    def attr(self, name: str, default: Any = None) -> Any:
        return self.attrs.get(name, default)

    def with_attrs(self, **changes: Any) -> "Node":
        """Return a copy with attributes updated; None values remove the key."""
        attrs = dict(self.attrs)
        for key, value in changes.items():
            if value is None:
                attrs.pop(key, None)
            else:
                attrs[key] = value
        return replace(self, attrs=attrs)

    def with_children(self, children: Iterable["Node"]) -> "Node":
        return replace(self, children=tuple(children))

    def text_content(self) -> str:
        if self.is_text:
            return self.text
        return "".join(child.text_content() for child in self.children)

    def depth_first(self) -> Iterator["Node"]:
        """Traverse tree depth-first, yielding self then children."""
        yield self
        for child in self.children:
            yield from child.depth_first()


def text_node(text: str, marks: Iterable[Mark] = ()) -> Node:
    """Build a text node with canonically ordered marks."""
    return Node(kind=NodeKind.TEXT, text=text, marks=normalize_marks(marks))


def paragraph(*children: Node, **attrs: Any) -> Node:
    return Node(kind=NodeKind.PARAGRAPH, attrs=attrs, children=normalize_inline(children))


def heading(level: int, *children: Node, **attrs: Any) -> Node:
    attrs["level"] = level
    return Node(kind=NodeKind.HEADING, attrs=attrs, children=normalize_inline(children))


def normalize_inline(children: Iterable[Node]) -> Tuple[Node, ...]:
    """Drop empty text nodes and merge neighbours that carry the same marks."""
    result: List[Node] = []
    for child in children:
        if child.is_text and not child.text:
            continue
        if result and child.is_text and result[-1].is_text and result[-1].marks == child.marks:
            result[-1] = replace(result[-1], text=result[-1].text + child.text)
        else:
            result.append(child)
    return tuple(result)


def slice_inline(children: Tuple[Node, ...], start: int, end: Optional[int] = None) -> Tuple[Node, ...]:
    """Cut the inline content of a textblock to the character range [start, end)."""
    result: List[Node] = []
    pos = 0
    for child in children:
        size = len(child.text)
        child_start, child_end = pos, pos + size
        pos = child_end
        lo = max(start, child_start)
        hi = child_end if end is None else min(end, child_end)
        if lo >= hi:
            continue
        result.append(replace(child, text=child.text[lo - child_start:hi - child_start]))
    return tuple(result)


def map_inline(children: Tuple[Node, ...], start: int, end: int, fn) -> Tuple[Node, ...]:
    """
    Apply `fn` to the marks of every character in [start, end).

    Text nodes straddling the boundaries are split so only the covered
    characters change.

    Args:
        children: Inline content of a textblock.
        start: First character offset.
        end: Offset one past the last character.
        fn: Callable taking and returning a marks tuple.

    Returns:
        New, normalized inline content.
    """
    head = slice_inline(children, 0, start)
    middle = tuple(
        replace(child, marks=normalize_marks(fn(child.marks)))
        for child in slice_inline(children, start, end)
    )
    tail = slice_inline(children, end)
    return normalize_inline(head + middle + tail)


def marks_at(children: Tuple[Node, ...], offset: int) -> Tuple[Mark, ...]:
    """Marks in effect at a cursor: those of the character before it, else after it."""
    pos = 0
    previous: Optional[Node] = None
    for child in children:
        size = len(child.text)
        if offset <= pos + size and offset > pos:
            return child.marks
        if offset == pos:
            return previous.marks if previous is not None else child.marks
        pos += size
        previous = child
    return previous.marks if previous is not None else ()


@dataclass(frozen=True)
class Document:
    """
    Root container holding an ordered sequence of block nodes.

    A document always holds at least one block, so a cursor position
    always exists.
    """
    blocks: Tuple[Node, ...]

    def __post_init__(self):
        if not self.blocks:
            raise SchemaViolation("A document must contain at least one block node")

    @classmethod
    def create_empty(cls) -> "Document":
        """Document holding one empty paragraph."""
        return cls(blocks=(Node(kind=NodeKind.PARAGRAPH),))

    @classmethod
    def of(cls, *blocks: Node) -> "Document":
        return cls(blocks=tuple(blocks)) if blocks else cls.create_empty()

    @property
    def children(self) -> Tuple[Node, ...]:
        return self.blocks

    def text_content(self) -> str:
        return "\n".join(block.text_content() for block in self.blocks)

    def depth_first(self) -> Iterator[Node]:
        for block in self.blocks:
            yield from block.depth_first()
