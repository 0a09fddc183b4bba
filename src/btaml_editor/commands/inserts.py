"""Atomic media inserts: images, videos and YouTube embeds."""

from typing import Optional, Union

from ..models.document import Node
from ..models.enums import MediaKind, NodeKind
from ..models.exceptions import InvalidArgument
from ..models.tree import delete_range, insert_nodes
from .marks import validate_href
from .media_urls import is_youtube_url, normalize_youtube_url
from .state import EditorState

YOUTUBE_WIDTH = 560
YOUTUBE_HEIGHT = 315
YOUTUBE_ALLOW = "accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture"


def insert_block(state: EditorState, node: Node) -> EditorState:
    """Delete the selected span, then insert `node` at the resulting cursor."""
    doc, cursor = delete_range(state.doc, state.selection)
    doc, cursor = insert_nodes(doc, cursor, (node,))
    return state.with_doc(doc, cursor)


def insert_image(state: EditorState, src: str, alt: Optional[str] = None,
                 title: Optional[str] = None) -> EditorState:
    attrs = {"src": _validate_src(src)}
    if alt:
        attrs["alt"] = str(alt)
    if title:
        attrs["title"] = str(title)
    return insert_block(state, Node(kind=NodeKind.IMAGE, attrs=attrs))


def insert_video(state: EditorState, src: str, controls: bool = True,
                 width: Union[str, int] = "100%", height: Union[str, int] = "auto") -> EditorState:
    attrs = {
        "src": _validate_src(src),
        "controls": bool(controls),
        "width": _validate_dimension(width, "width"),
        "height": _validate_dimension(height, "height"),
    }
    return insert_block(state, Node(kind=NodeKind.VIDEO, attrs=attrs))


def insert_youtube(state: EditorState, src: str, width: Optional[int] = None,
                   height: Optional[int] = None) -> EditorState:
    """
    Insert a YouTube embed.

    Watch-page, short and embed URLs are normalized to the canonical embed
    URL; other YouTube URLs are inserted as given.

    Raises:
        InvalidArgument: If src is empty or not on a YouTube host, or a
            dimension is not a positive integer.
    """
    src = _validate_src(src)
    if not is_youtube_url(src):
        raise InvalidArgument(f"Not a YouTube URL: {src!r}")
    attrs = {
        "src": normalize_youtube_url(src),
        "width": _validate_pixels(YOUTUBE_WIDTH if width is None else width, "width"),
        "height": _validate_pixels(YOUTUBE_HEIGHT if height is None else height, "height"),
        "frameborder": "0",
        "allow": YOUTUBE_ALLOW,
        "allowfullscreen": True,
    }
    return insert_block(state, Node(kind=NodeKind.YOUTUBE, attrs=attrs))


def insert_media(state: EditorState, kind: MediaKind, url: str) -> EditorState:
    """Insert the node for an uploaded file once its URL is known."""
    if MediaKind(kind) == MediaKind.IMAGE:
        return insert_image(state, url)
    return insert_video(state, url)


def _validate_src(src) -> str:
    try:
        return validate_href(src)
    except InvalidArgument as e:
        raise InvalidArgument(f"Invalid media source: {e.message}")


def _validate_pixels(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgument(f"{name} must be a positive integer, got {value!r}")
    return value


def _validate_dimension(value, name: str) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(_validate_pixels(value, name))
    if not isinstance(value, str) or not value.strip() or any(c in value for c in '"<>;'):
        raise InvalidArgument(f"Invalid {name}: {value!r}")
    return value.strip()
