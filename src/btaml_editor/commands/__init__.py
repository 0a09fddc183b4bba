"""Command engine: editor state, editing commands and the command registry."""

from .blocks import (
    set_heading,
    set_paragraph,
    set_text_align,
    toggle_blockquote,
    toggle_code_block,
    toggle_heading,
    unset_text_align,
)
from .inserts import insert_image, insert_media, insert_video, insert_youtube
from .lists import toggle_bullet_list, toggle_ordered_list
from .marks import (
    set_font_family,
    set_highlight,
    set_link,
    set_text_color,
    toggle_mark,
    unset_all_marks,
    unset_link,
    unset_mark,
)
from .media_urls import canonical_url, extract_youtube_id, is_youtube_url, normalize_youtube_url
from .queries import active_marks, heading_level, is_active
from .registry import HISTORY_COMMANDS, Command, CommandName, CommandRegistry, create_default_registry
from .state import EditorState
from .text import delete_selection, insert_text, select_all, split_block

__all__ = [
    "EditorState",
    "Command",
    "CommandName",
    "CommandRegistry",
    "HISTORY_COMMANDS",
    "create_default_registry",
    "is_active",
    "active_marks",
    "heading_level",
    "toggle_mark",
    "unset_mark",
    "unset_all_marks",
    "set_text_color",
    "set_highlight",
    "set_font_family",
    "set_link",
    "unset_link",
    "set_paragraph",
    "set_heading",
    "toggle_heading",
    "toggle_blockquote",
    "toggle_code_block",
    "set_text_align",
    "unset_text_align",
    "toggle_bullet_list",
    "toggle_ordered_list",
    "insert_image",
    "insert_video",
    "insert_youtube",
    "insert_media",
    "insert_text",
    "delete_selection",
    "split_block",
    "select_all",
    "extract_youtube_id",
    "normalize_youtube_url",
    "is_youtube_url",
    "canonical_url",
]
