"""Cursor and range references into a document."""

from dataclasses import dataclass
from typing import Any, Sequence, Tuple, Union

Path = Tuple[int, ...]


@dataclass(frozen=True, order=True)
class Position:
    """
    A point in the document.

    `path` addresses a leaf block (a textblock or an atomic node) by child
    indices from the document root. `offset` counts characters into the
    textblock's inline content; it is always 0 for atomic nodes, where the
    position selects the node itself.
    """
    path: Path
    offset: int = 0

    @classmethod
    def coerce(cls, value: Union["Position", Sequence[Any], dict]) -> "Position":
        """Build a position from a Position, a (path, offset) pair or a dict."""
        if isinstance(value, Position):
            return value
        if isinstance(value, dict):
            return cls(path=tuple(int(i) for i in value["path"]), offset=int(value.get("offset", 0)))
        path, offset = value
        return cls(path=tuple(int(i) for i in path), offset=int(offset))

    def to_dict(self) -> dict:
        return {"path": list(self.path), "offset": self.offset}


@dataclass(frozen=True)
class Selection:
    """
    Anchor/head pair. Collapsed when both ends coincide.

    Selections are ephemeral: every command recomputes the selection along
    with the document it returns.
    """
    anchor: Position
    head: Position

    @classmethod
    def cursor(cls, path: Path, offset: int = 0) -> "Selection":
        position = Position(tuple(path), offset)
        return cls(anchor=position, head=position)

    @classmethod
    def between(cls, anchor: Position, head: Position) -> "Selection":
        return cls(anchor=anchor, head=head)

    @property
    def start(self) -> Position:
        return min(self.anchor, self.head)

    @property
    def end(self) -> Position:
        return max(self.anchor, self.head)

    @property
    def is_collapsed(self) -> bool:
        return self.anchor == self.head

    def to_dict(self) -> dict:
        return {"anchor": self.anchor.to_dict(), "head": self.head.to_dict()}
