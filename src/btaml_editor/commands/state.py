"""Editor state: the (document, selection) pair commands operate on."""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from ..models.document import Document, Mark
from ..models.selection import Position, Selection
from ..models.tree import create_empty, end_of, leaves, start_of


@dataclass(frozen=True)
class EditorState:
    """
    Immutable snapshot of an editing session.

    `stored_marks` holds marks toggled on a collapsed cursor; they apply to
    the next inserted text and are cleared by any other selection change.
    """
    doc: Document
    selection: Selection
    stored_marks: Optional[Tuple[Mark, ...]] = None

    @classmethod
    def create(cls, doc: Optional[Document] = None) -> "EditorState":
        doc = doc or create_empty()
        position = start_of(doc)
        return cls(doc=doc, selection=Selection(position, position))

    def with_doc(self, doc: Document, cursor: Position) -> "EditorState":
        """New state with `doc` and a collapsed cursor; stored marks are dropped."""
        return EditorState(doc=doc, selection=Selection(cursor, cursor))

    def with_selection(self, selection: Selection) -> "EditorState":
        return EditorState(doc=self.doc, selection=selection)

    def with_stored_marks(self, marks: Optional[Tuple[Mark, ...]]) -> "EditorState":
        return replace(self, stored_marks=marks)

    def select_all(self) -> "EditorState":
        return self.with_selection(Selection(start_of(self.doc), end_of(self.doc)))

    def remap(self, doc: Document) -> "EditorState":
        """
        New state for a document whose leaf blocks keep their order and
        content, such as after wrapping blocks in a list or blockquote.

        Each end of the selection moves to the leaf block with the same
        ordinal in `doc`.
        """
        old_paths = [path for path, _ in leaves(self.doc)]
        new_paths = [path for path, _ in leaves(doc)]

        def move(position: Position) -> Position:
            return Position(new_paths[old_paths.index(position.path)], position.offset)

        return EditorState(doc=doc, selection=Selection(move(self.selection.anchor), move(self.selection.head)))
