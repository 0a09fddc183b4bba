"""Editing sessions, undo history and the toolbar controller."""

from .editor_session import EditorSession
from .history import History
from .manager import EditorSessionManager
from .toolbar import DEFAULT_CONTROLS, ToolbarControl, ToolbarController

__all__ = [
    "EditorSession",
    "EditorSessionManager",
    "History",
    "ToolbarControl",
    "ToolbarController",
    "DEFAULT_CONTROLS",
]
