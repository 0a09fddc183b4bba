"""Mark commands: toggles, colors, fonts and links."""

from typing import List, Optional, Tuple

from ..models.document import (
    Mark,
    add_mark,
    find_mark,
    map_inline,
    marks_at,
    remove_mark,
)
from ..models.enums import MarkKind
from ..models.exceptions import InvalidArgument
from ..models.schema import marks_allowed
from ..models.selection import Path
from ..models.tree import leaves_in, node_at, resolve, update_at
from .media_urls import canonical_url
from .state import EditorState

# (path, start, end) of the selected characters inside one textblock.
MarkRange = Tuple[Path, int, int]

_FORBIDDEN_STYLE_CHARS = set(';"<>{}\\')
_FORBIDDEN_SCHEMES = ("javascript:", "vbscript:", "data:")


def mark_ranges(state: EditorState) -> List[MarkRange]:
    """Character ranges covered by the selection in textblocks that accept marks."""
    selection = state.selection
    start, end = selection.start, selection.end
    ranges = []
    for path, node in leaves_in(state.doc, selection):
        if not node.is_textblock or not marks_allowed(node):
            continue
        lo = start.offset if path == start.path else 0
        hi = end.offset if path == end.path else node.content_size
        if hi > lo:
            ranges.append((path, lo, hi))
    return ranges


def range_has_mark(state: EditorState, ranges: List[MarkRange], kind: MarkKind,
                   value: Optional[str] = None) -> bool:
    """Whether every selected character carries a mark of `kind` (and `value`, if given)."""
    if not ranges:
        return False
    for path, lo, hi in ranges:
        block = node_at(state.doc, path)
        pos = 0
        for child in block.children:
            child_lo, child_hi = pos, pos + len(child.text)
            pos = child_hi
            if child_hi <= lo or child_lo >= hi:
                continue
            mark = find_mark(child.marks, kind)
            if mark is None or (value is not None and mark.value != value):
                return False
    return True


def cursor_marks(state: EditorState) -> Tuple[Mark, ...]:
    """Marks that apply at a collapsed cursor, stored marks first."""
    if state.stored_marks is not None:
        return state.stored_marks
    leaf = resolve(state.doc, state.selection.head)
    if not leaf.is_textblock:
        return ()
    return marks_at(leaf.children, state.selection.head.offset)


def toggle_mark(state: EditorState, kind: MarkKind) -> Optional[EditorState]:
    """
    Add `kind` over the whole selection, or remove it when every selected
    character already carries it.

    On a collapsed cursor the toggle is recorded in the stored marks and
    applies to the next inserted text.
    """
    if state.selection.is_collapsed:
        if not _cursor_accepts_marks(state):
            return None
        current = cursor_marks(state)
        if find_mark(current, kind):
            return state.with_stored_marks(remove_mark(current, kind))
        return state.with_stored_marks(add_mark(current, Mark(kind)))

    ranges = mark_ranges(state)
    if not ranges:
        return None
    if range_has_mark(state, ranges, kind):
        return _apply(state, ranges, lambda marks: remove_mark(marks, kind))
    return _apply(state, ranges, lambda marks: add_mark(marks, Mark(kind)))


def set_mark(state: EditorState, mark: Mark) -> Optional[EditorState]:
    """Apply `mark` over the selection, replacing any mark of the same kind."""
    if state.selection.is_collapsed:
        if not _cursor_accepts_marks(state):
            return None
        return state.with_stored_marks(add_mark(cursor_marks(state), mark))
    ranges = mark_ranges(state)
    if not ranges:
        return None
    return _apply(state, ranges, lambda marks: add_mark(marks, mark))


def unset_mark(state: EditorState, kind: MarkKind) -> Optional[EditorState]:
    """Remove every mark of `kind` from the selection."""
    if state.selection.is_collapsed:
        current = cursor_marks(state)
        if not find_mark(current, kind):
            return None
        return state.with_stored_marks(remove_mark(current, kind))
    ranges = mark_ranges(state)
    if not ranges:
        return None
    return _apply(state, ranges, lambda marks: remove_mark(marks, kind))


def unset_all_marks(state: EditorState) -> Optional[EditorState]:
    if state.selection.is_collapsed:
        if not cursor_marks(state):
            return None
        return state.with_stored_marks(())
    ranges = mark_ranges(state)
    if not ranges:
        return None
    return _apply(state, ranges, lambda marks: ())


def set_text_color(state: EditorState, value: str) -> Optional[EditorState]:
    return set_mark(state, Mark(MarkKind.TEXT_COLOR, validate_style_value(value, "color")))


def set_highlight(state: EditorState, value: Optional[str] = None) -> Optional[EditorState]:
    """Highlight the selection; without a value the default highlight color is used."""
    if value is not None:
        value = validate_style_value(value, "highlight color")
    return set_mark(state, Mark(MarkKind.HIGHLIGHT, value))


def set_font_family(state: EditorState, value: str) -> Optional[EditorState]:
    return set_mark(state, Mark(MarkKind.FONT_FAMILY, validate_style_value(value, "font family")))


def set_link(state: EditorState, href: str) -> Optional[EditorState]:
    """
    Link the selection to `href`.

    On a collapsed cursor the link under the cursor is updated; without one
    the command does nothing.
    """
    href = validate_href(href)
    mark = Mark(MarkKind.LINK, href)
    if not state.selection.is_collapsed:
        return set_mark(state, mark)
    extent = link_extent(state)
    if extent is None:
        return None
    return _apply(state, [extent], lambda marks: add_mark(marks, mark))


def unset_link(state: EditorState) -> Optional[EditorState]:
    """Remove links from the selection, or the whole link under a collapsed cursor."""
    if not state.selection.is_collapsed:
        ranges = mark_ranges(state)
        if not ranges:
            return None
        return _apply(state, ranges, lambda marks: remove_mark(marks, MarkKind.LINK))
    extent = link_extent(state)
    if extent is None:
        return None
    return _apply(state, [extent], lambda marks: remove_mark(marks, MarkKind.LINK))


def link_extent(state: EditorState) -> Optional[MarkRange]:
    """Character range of the link run touching a collapsed cursor."""
    head = state.selection.head
    leaf = resolve(state.doc, head)
    if not leaf.is_textblock:
        return None

    runs = []
    pos = 0
    for child in leaf.children:
        runs.append((pos, pos + len(child.text), find_mark(child.marks, MarkKind.LINK)))
        pos += len(child.text)

    for index, (lo, hi, link) in enumerate(runs):
        if link is None or not (lo <= head.offset <= hi):
            continue
        first = last = index
        while first > 0 and runs[first - 1][2] == link:
            first -= 1
        while last < len(runs) - 1 and runs[last + 1][2] == link:
            last += 1
        return head.path, runs[first][0], runs[last][1]
    return None


def validate_style_value(value, name: str) -> str:
    """Colors and font names end up inside a style attribute, so keep them simple."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"{name} must be a non-empty string")
    value = value.strip()
    if _FORBIDDEN_STYLE_CHARS & set(value):
        raise InvalidArgument(f"{name} contains forbidden characters: {value!r}")
    return value


def validate_href(href) -> str:
    """Checked and percent-encoded URL, in the form the HTML serializer writes it."""
    if not isinstance(href, str) or not href.strip():
        raise InvalidArgument("href must be a non-empty string")
    href = href.strip()
    if href.lower().replace(" ", "").startswith(_FORBIDDEN_SCHEMES):
        raise InvalidArgument(f"Unsafe link scheme: {href!r}")
    return canonical_url(href)


def _cursor_accepts_marks(state: EditorState) -> bool:
    leaf = resolve(state.doc, state.selection.head)
    return leaf.is_textblock and marks_allowed(leaf)


def _apply(state: EditorState, ranges: List[MarkRange], fn) -> Optional[EditorState]:
    doc = state.doc
    for path, lo, hi in ranges:
        doc = update_at(doc, path, lambda node: node.with_children(map_inline(node.children, lo, hi, fn)))
    if doc == state.doc:
        return None
    return EditorState(doc=doc, selection=state.selection)


__all__ = [
    "mark_ranges",
    "range_has_mark",
    "cursor_marks",
    "toggle_mark",
    "set_mark",
    "unset_mark",
    "unset_all_marks",
    "set_text_color",
    "set_highlight",
    "set_font_family",
    "set_link",
    "unset_link",
    "link_extent",
]
