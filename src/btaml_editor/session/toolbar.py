"""Toolbar controller: maps UI controls to commands and pressed state."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..commands.registry import CommandName
from ..models.exceptions import UnknownCommand
from .editor_session import EditorSession


@dataclass(frozen=True)
class ToolbarControl:
    """
    One toolbar button.

    Attributes:
        name: Control identifier used by the UI.
        command: Command dispatched when the control is pressed.
        params: Fixed parameters for the command.
        query: Mark or node name whose activity shows the control pressed.
        query_attrs: Attributes the active query must also match.
        prompt: Parameter the UI asks the user for; pressing without a
            value does nothing.
    """
    name: str
    command: CommandName
    params: Dict[str, Any] = field(default_factory=dict)
    query: Optional[str] = None
    query_attrs: Optional[Dict[str, Any]] = None
    prompt: Optional[str] = None


DEFAULT_CONTROLS: Tuple[ToolbarControl, ...] = (
    ToolbarControl("bold", CommandName.TOGGLE_BOLD, query="bold"),
    ToolbarControl("italic", CommandName.TOGGLE_ITALIC, query="italic"),
    ToolbarControl("underline", CommandName.TOGGLE_UNDERLINE, query="underline"),
    ToolbarControl("strike", CommandName.TOGGLE_STRIKE, query="strike"),
    ToolbarControl("textColor", CommandName.SET_TEXT_COLOR, query="textColor", prompt="value"),
    ToolbarControl("highlight", CommandName.SET_HIGHLIGHT, query="highlight", prompt="value"),
    ToolbarControl("subscript", CommandName.TOGGLE_SUBSCRIPT, query="subscript"),
    ToolbarControl("superscript", CommandName.TOGGLE_SUPERSCRIPT, query="superscript"),
    ToolbarControl("code", CommandName.TOGGLE_CODE, query="code"),
    ToolbarControl("bulletList", CommandName.TOGGLE_BULLET_LIST, query="bulletList"),
    ToolbarControl("orderedList", CommandName.TOGGLE_ORDERED_LIST, query="orderedList"),
    ToolbarControl("alignLeft", CommandName.SET_TEXT_ALIGN, {"direction": "left"}, query_attrs={"textAlign": "left"}),
    ToolbarControl("alignCenter", CommandName.SET_TEXT_ALIGN, {"direction": "center"},
                   query_attrs={"textAlign": "center"}),
    ToolbarControl("alignRight", CommandName.SET_TEXT_ALIGN, {"direction": "right"},
                   query_attrs={"textAlign": "right"}),
    ToolbarControl("alignJustify", CommandName.SET_TEXT_ALIGN, {"direction": "justify"},
                   query_attrs={"textAlign": "justify"}),
    ToolbarControl("blockquote", CommandName.TOGGLE_BLOCKQUOTE, query="blockquote"),
    ToolbarControl("codeBlock", CommandName.TOGGLE_CODE_BLOCK, query="codeBlock"),
    ToolbarControl("link", CommandName.SET_LINK, query="link", prompt="href"),
    ToolbarControl("image", CommandName.INSERT_IMAGE, prompt="src"),
    ToolbarControl("video", CommandName.INSERT_VIDEO, prompt="src"),
    ToolbarControl("youtube", CommandName.INSERT_YOUTUBE, prompt="src"),
    ToolbarControl("undo", CommandName.UNDO),
    ToolbarControl("redo", CommandName.REDO),
)


class ToolbarController:
    """
    Dispatches control presses to a session and reports pressed state.

    The controller only reads the session's state and dispatches commands;
    it never changes the document directly.
    """

    def __init__(self, session: EditorSession, controls: Tuple[ToolbarControl, ...] = DEFAULT_CONTROLS):
        self.session = session
        self.controls: Dict[str, ToolbarControl] = {control.name: control for control in controls}

    def control(self, name: str) -> ToolbarControl:
        """
        Raises:
            UnknownCommand: If no control is called `name`.
        """
        if name not in self.controls:
            raise UnknownCommand(f"Unknown toolbar control: {name!r}", details={"control": name})
        return self.controls[name]

    def press(self, name: str, **params: Any) -> bool:
        """
        Press a control.

        Returns:
            True if the document or selection changed.
        """
        control = self.control(name)
        if control.prompt and not params.get(control.prompt):
            return False
        return self.session.dispatch(control.command, {**control.params, **params})

    def select_heading(self, level: int) -> bool:
        """Heading select box: 0 picks a paragraph, 1..6 toggles that heading."""
        if level == 0:
            return self.session.dispatch(CommandName.SET_PARAGRAPH)
        return self.session.dispatch(CommandName.TOGGLE_HEADING, {"level": level})

    def is_pressed(self, name: str) -> bool:
        control = self.control(name)
        if control.query is None and control.query_attrs is None:
            return False
        return self.session.is_active(control.query, control.query_attrs)

    def state(self) -> Dict[str, Any]:
        """Pressed flags for every control plus heading level and history availability."""
        return {
            "pressed": {name: self.is_pressed(name) for name in self.controls},
            "heading_level": self.session.heading_level(),
            "can_undo": self.session.history.can_undo,
            "can_redo": self.session.history.can_redo,
        }
