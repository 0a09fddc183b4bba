"""
Command registry.

Maps the enumerated command names to pure handlers taking an EditorState
and keyword parameters and returning the new state, or None when the
command does not apply. A string-keyed lookup serves the toolbar and
HTTP boundaries.
"""

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from ..models.enums import MarkKind
from ..models.exceptions import InvalidArgument, UnknownCommand
from . import blocks, inserts, lists, marks, text
from .state import EditorState

Handler = Callable[..., Optional[EditorState]]


class CommandName(Enum):
    """Every command the editor understands, by its wire name."""
    TOGGLE_BOLD = "toggleBold"
    TOGGLE_ITALIC = "toggleItalic"
    TOGGLE_UNDERLINE = "toggleUnderline"
    TOGGLE_STRIKE = "toggleStrike"
    TOGGLE_SUBSCRIPT = "toggleSubscript"
    TOGGLE_SUPERSCRIPT = "toggleSuperscript"
    TOGGLE_CODE = "toggleCode"
    SET_PARAGRAPH = "setParagraph"
    SET_HEADING = "setHeading"
    TOGGLE_HEADING = "toggleHeading"
    TOGGLE_BULLET_LIST = "toggleBulletList"
    TOGGLE_ORDERED_LIST = "toggleOrderedList"
    TOGGLE_BLOCKQUOTE = "toggleBlockquote"
    TOGGLE_CODE_BLOCK = "toggleCodeBlock"
    SET_TEXT_ALIGN = "setTextAlign"
    UNSET_TEXT_ALIGN = "unsetTextAlign"
    SET_TEXT_COLOR = "setTextColor"
    UNSET_TEXT_COLOR = "unsetTextColor"
    SET_HIGHLIGHT = "setHighlight"
    UNSET_HIGHLIGHT = "unsetHighlight"
    SET_FONT_FAMILY = "setFontFamily"
    UNSET_FONT_FAMILY = "unsetFontFamily"
    UNSET_ALL_MARKS = "unsetAllMarks"
    INSERT_IMAGE = "insertImage"
    SET_IMAGE = "setImage"
    INSERT_VIDEO = "insertVideo"
    SET_VIDEO = "setVideo"
    INSERT_YOUTUBE = "insertYouTube"
    SET_YOUTUBE = "setYouTube"
    SET_LINK = "setLink"
    UNSET_LINK = "unsetLink"
    INSERT_TEXT = "insertText"
    DELETE_SELECTION = "deleteSelection"
    SPLIT_BLOCK = "splitBlock"
    SELECT_ALL = "selectAll"
    UNDO = "undo"
    REDO = "redo"


# Handled by the session's history rather than by a handler.
HISTORY_COMMANDS = frozenset({CommandName.UNDO, CommandName.REDO})


@dataclass(frozen=True)
class Command:
    """A registered command: its name, handler and a short description."""
    name: CommandName
    handler: Handler
    description: str = ""

    def apply(self, state: EditorState, params: Optional[Dict[str, Any]] = None) -> Optional[EditorState]:
        """
        Run the handler against `state`.

        Raises:
            InvalidArgument: If `params` do not fit the handler's signature,
                or the handler rejects a value.
            SchemaViolation: If the result would break the schema.
        """
        params = params or {}
        try:
            inspect.signature(self.handler).bind(state, **params)
        except TypeError as e:
            raise InvalidArgument(
                message=f"Bad parameters for '{self.name.value}': {e}",
                details={"params": sorted(params)},
            )
        return self.handler(state, **params)


class CommandRegistry:
    """Lookup table from command names to handlers."""

    def __init__(self):
        self._commands: Dict[CommandName, Command] = {}

    def register(self, name: CommandName, handler: Handler, description: str = "") -> None:
        self._commands[name] = Command(name=name, handler=handler, description=description)

    def lookup(self, name: Union[CommandName, str]) -> Command:
        """
        Find a command by enum member or wire name.

        Raises:
            UnknownCommand: If no command is registered under `name`.
        """
        if not isinstance(name, CommandName):
            try:
                name = CommandName(name)
            except ValueError:
                raise UnknownCommand(f"Unknown command: {name!r}", details={"command": name})
        if name not in self._commands:
            raise UnknownCommand(f"Command '{name.value}' has no handler", details={"command": name.value})
        return self._commands[name]

    def __contains__(self, name: Union[CommandName, str]) -> bool:
        try:
            self.lookup(name)
        except UnknownCommand:
            return False
        return True

    def names(self) -> List[str]:
        return [name.value for name in self._commands]

    def apply(self, state: EditorState, name: Union[CommandName, str],
              params: Optional[Dict[str, Any]] = None) -> Optional[EditorState]:
        return self.lookup(name).apply(state, params)


def _toggle(kind: MarkKind) -> Handler:
    def handler(state: EditorState) -> Optional[EditorState]:
        return marks.toggle_mark(state, kind)
    return handler


def _unset(kind: MarkKind) -> Handler:
    def handler(state: EditorState) -> Optional[EditorState]:
        return marks.unset_mark(state, kind)
    return handler


def create_default_registry() -> CommandRegistry:
    """Registry holding the full editing catalog except undo and redo."""
    registry = CommandRegistry()
    toggles = {
        CommandName.TOGGLE_BOLD: MarkKind.BOLD,
        CommandName.TOGGLE_ITALIC: MarkKind.ITALIC,
        CommandName.TOGGLE_UNDERLINE: MarkKind.UNDERLINE,
        CommandName.TOGGLE_STRIKE: MarkKind.STRIKE,
        CommandName.TOGGLE_SUBSCRIPT: MarkKind.SUBSCRIPT,
        CommandName.TOGGLE_SUPERSCRIPT: MarkKind.SUPERSCRIPT,
        CommandName.TOGGLE_CODE: MarkKind.CODE,
    }
    for name, kind in toggles.items():
        registry.register(name, _toggle(kind), f"Toggle the {kind.value} mark")

    registry.register(CommandName.SET_PARAGRAPH, blocks.set_paragraph, "Convert blocks to paragraphs")
    registry.register(CommandName.SET_HEADING, blocks.set_heading, "Convert blocks to headings")
    registry.register(CommandName.TOGGLE_HEADING, blocks.toggle_heading, "Toggle between heading and paragraph")
    registry.register(CommandName.TOGGLE_BULLET_LIST, lists.toggle_bullet_list, "Wrap in or lift out of a bullet list")
    registry.register(CommandName.TOGGLE_ORDERED_LIST, lists.toggle_ordered_list, "Wrap in or lift out of an ordered list")
    registry.register(CommandName.TOGGLE_BLOCKQUOTE, blocks.toggle_blockquote, "Wrap in or lift out of a blockquote")
    registry.register(CommandName.TOGGLE_CODE_BLOCK, blocks.toggle_code_block, "Toggle a code block")
    registry.register(CommandName.SET_TEXT_ALIGN, blocks.set_text_align, "Align paragraphs and headings")
    registry.register(CommandName.UNSET_TEXT_ALIGN, blocks.unset_text_align, "Reset alignment")

    registry.register(CommandName.SET_TEXT_COLOR, marks.set_text_color, "Color the selected text")
    registry.register(CommandName.UNSET_TEXT_COLOR, _unset(MarkKind.TEXT_COLOR), "Remove text color")
    registry.register(CommandName.SET_HIGHLIGHT, marks.set_highlight, "Highlight the selected text")
    registry.register(CommandName.UNSET_HIGHLIGHT, _unset(MarkKind.HIGHLIGHT), "Remove highlight")
    registry.register(CommandName.SET_FONT_FAMILY, marks.set_font_family, "Set the font family")
    registry.register(CommandName.UNSET_FONT_FAMILY, _unset(MarkKind.FONT_FAMILY), "Remove font family")
    registry.register(CommandName.UNSET_ALL_MARKS, marks.unset_all_marks, "Clear formatting")
    registry.register(CommandName.SET_LINK, marks.set_link, "Link the selection")
    registry.register(CommandName.UNSET_LINK, marks.unset_link, "Remove a link")

    registry.register(CommandName.INSERT_IMAGE, inserts.insert_image, "Insert an image")
    registry.register(CommandName.SET_IMAGE, inserts.insert_image, "Insert an image")
    registry.register(CommandName.INSERT_VIDEO, inserts.insert_video, "Insert a video")
    registry.register(CommandName.SET_VIDEO, inserts.insert_video, "Insert a video")
    registry.register(CommandName.INSERT_YOUTUBE, inserts.insert_youtube, "Embed a YouTube video")
    registry.register(CommandName.SET_YOUTUBE, inserts.insert_youtube, "Embed a YouTube video")

    registry.register(CommandName.INSERT_TEXT, text.insert_text, "Type text at the selection")
    registry.register(CommandName.DELETE_SELECTION, text.delete_selection, "Delete the selection")
    registry.register(CommandName.SPLIT_BLOCK, text.split_block, "Split the block at the cursor")
    registry.register(CommandName.SELECT_ALL, text.select_all, "Select the whole document")
    return registry
