"""Undo/redo history of editor state snapshots."""

from collections import deque
from typing import Deque, Optional

from ..commands.state import EditorState


class History:
    """
    Bounded undo and redo stacks.

    Each entry is a full EditorState, so undo restores the document, the
    selection and any stored marks together. Recording a new change clears
    the redo stack. With a depth set, the oldest entries are evicted first.
    """

    def __init__(self, depth: Optional[int] = None):
        self.depth = depth
        self._undo: Deque[EditorState] = deque(maxlen=depth)
        self._redo: Deque[EditorState] = deque(maxlen=depth)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def __len__(self) -> int:
        return len(self._undo)

    def record(self, previous: EditorState) -> None:
        """Remember the state a change started from."""
        self._undo.append(previous)
        self._redo.clear()

    def undo(self, current: EditorState) -> Optional[EditorState]:
        """State before the last change, or None when there is nothing to undo."""
        if not self._undo:
            return None
        self._redo.append(current)
        return self._undo.pop()

    def redo(self, current: EditorState) -> Optional[EditorState]:
        if not self._redo:
            return None
        self._undo.append(current)
        return self._redo.pop()

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
