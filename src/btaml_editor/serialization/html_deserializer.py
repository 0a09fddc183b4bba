"""Parses the HTML interchange string back into a Document."""

import logging
import re
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from lxml import etree
import lxml.html

from ..commands.inserts import YOUTUBE_ALLOW, YOUTUBE_HEIGHT, YOUTUBE_WIDTH
from ..commands.media_urls import canonical_url, is_youtube_url
from ..models.document import Document, Mark, Node, normalize_inline, text_node
from ..models.enums import MarkKind, NodeKind, UnknownTagPolicy
from ..models.exceptions import SchemaViolation
from ..models.schema import ALIGN_VALUES, validate_document
from .report import ParseReport

logger = logging.getLogger(__name__)

# Non-content elements, always dropped together with everything inside them.
SKIPPED_TAGS = frozenset({
    "script", "style", "head", "title", "meta", "link", "noscript",
    "template", "object", "embed", "svg", "canvas",
})

# Generic wrappers, unwrapped silently.
TRANSPARENT_TAGS = frozenset({"html", "body", "div", "span", "font"})

# Unknown tags that still end the paragraph they interrupt.
BLOCKISH_TAGS = frozenset({
    "div", "section", "article", "header", "footer", "main", "aside", "nav",
    "table", "thead", "tbody", "tfoot", "tr", "td", "th", "caption",
    "figure", "figcaption", "dl", "dt", "dd", "address", "details",
    "summary", "hr", "form", "fieldset",
})

HEADING_TAGS = {f"h{level}": level for level in range(1, 7)}

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WHITESPACE = str.maketrans({"\r": " ", "\n": " ", "\t": " "})
_UNSAFE_HREF = re.compile(r"^\s*(javascript|vbscript|data):", re.IGNORECASE)


class _Sink:
    """
    Collects blocks and pending inline runs while walking an element.

    In a container (document root, blockquote, list item) loose inline
    content is gathered into implicit paragraphs and whitespace between
    blocks is ignored. Inside an explicit textblock every character counts,
    and a nested block splits the textblock around it.
    """

    def __init__(self, kind: NodeKind = NodeKind.PARAGRAPH, attrs: Optional[dict] = None,
                 explicit: bool = False):
        self.kind = kind
        self.attrs = attrs or {}
        self.explicit = explicit
        self.blocks: List[Node] = []
        self.runs: List[Node] = []

    def text(self, value: str, marks: Tuple[Mark, ...]) -> None:
        value = _CONTROL_CHARS.sub("", value).translate(_WHITESPACE)
        if not value or (not self.explicit and not self.runs and not value.strip()):
            return
        self.runs.append(text_node(value, marks))

    def line_break(self, marks: Tuple[Mark, ...]) -> None:
        if self.explicit:
            self.runs.append(text_node(" ", marks))
        else:
            self.flush()

    def block(self, node: Node) -> None:
        self.flush()
        self.blocks.append(node)

    def flush(self) -> None:
        runs = list(self.runs)
        self.runs = []
        if not self.explicit:
            runs = _strip_edges(runs)
        children = normalize_inline(runs)
        if children:
            self.blocks.append(Node(kind=self.kind, attrs=dict(self.attrs), children=children))

    def finish(self) -> List[Node]:
        self.flush()
        if self.explicit and not self.blocks:
            self.blocks.append(Node(kind=self.kind, attrs=dict(self.attrs)))
        return self.blocks


class HtmlDeserializer:
    """
    Builds documents from HTML.

    Parsing never fails: foreign markup is unwrapped or dropped according
    to `unknown_tag_policy`, and input lxml cannot parse, or that yields an
    invalid tree, falls back to one plain paragraph per line of text. Every
    such decision is recorded in the ParseReport passed to `deserialize`.
    """

    def __init__(self, unknown_tag_policy: UnknownTagPolicy = UnknownTagPolicy.UNWRAP):
        self.unknown_tag_policy = UnknownTagPolicy(unknown_tag_policy)

    def deserialize(self, html: Optional[str], report: Optional[ParseReport] = None) -> Document:
        """
        Parse an interchange string.

        Args:
            html: Serialized content. None or blank input yields an empty
                document.
            report: Collects dropped and unwrapped tags and fallbacks.

        Returns:
            A schema-valid Document.
        """
        report = report if report is not None else ParseReport()
        if html is None or not html.strip():
            return Document.create_empty()

        try:
            root = lxml.html.fragment_fromstring(html, create_parent="div")
        except (etree.ParserError, ValueError) as e:
            logger.warning(f"HTML could not be parsed, falling back to plain text: {e}")
            report.fell_back(str(e))
            return self._plain_text(html)

        sink = _Sink()
        self._walk(root, sink, (), report, "doc")
        blocks = sink.finish()
        if not blocks:
            return Document.create_empty()

        try:
            doc = Document(blocks=tuple(blocks))
            validate_document(doc)
        except SchemaViolation as e:
            logger.warning(f"Parsed HTML breaks the schema, falling back to plain text: {e}")
            report.fell_back(str(e))
            return self._plain_text(root.text_content())
        return doc

    def _walk(self, element, sink: _Sink, marks: Tuple[Mark, ...], report: ParseReport, location: str) -> None:
        if element.text:
            sink.text(element.text, marks)
        for child in element:
            if isinstance(child.tag, str):
                self._element(child, sink, marks, report, f"{location}/{child.tag.lower()}")
            if child.tail:
                sink.text(child.tail, marks)

    def _element(self, element, sink: _Sink, marks: Tuple[Mark, ...], report: ParseReport, location: str) -> None:
        tag = element.tag.lower()

        if tag in SKIPPED_TAGS:
            report.dropped(tag, location, "non-content element")
        elif tag == "p":
            self._textblock(element, sink, NodeKind.PARAGRAPH, _align_attrs(element), marks, report, location)
        elif tag in HEADING_TAGS:
            attrs = {"level": HEADING_TAGS[tag], **_align_attrs(element)}
            self._textblock(element, sink, NodeKind.HEADING, attrs, marks, report, location)
        elif tag == "pre":
            sink.block(self._code_block(element))
        elif tag in ("ul", "ol"):
            self._list(element, sink, report, location)
        elif tag == "blockquote":
            children = self._container(element, report, location)
            sink.block(Node(kind=NodeKind.BLOCKQUOTE, children=tuple(children)))
        elif tag in ("img", "video", "iframe"):
            node = self._media(element, tag, report, location)
            if node is not None:
                sink.block(node)
        elif tag == "br":
            sink.line_break(marks)
        elif tag == "li":
            report.unwrapped(tag, location)
            self._walk(element, sink, marks, report, location)
        else:
            element_marks = _marks_for(element, tag)
            if element_marks is not None:
                self._walk(element, sink, marks + element_marks, report, location)
            elif tag in TRANSPARENT_TAGS:
                self._boundary(sink, tag)
                self._walk(element, sink, marks, report, location)
                self._boundary(sink, tag)
            elif self.unknown_tag_policy == UnknownTagPolicy.DROP:
                logger.warning(f"Dropping unknown tag <{tag}> at {location}")
                report.dropped(tag, location, "unknown tag")
                self._boundary(sink, tag)
            else:
                report.unwrapped(tag, location)
                self._boundary(sink, tag)
                self._walk(element, sink, marks, report, location)
                self._boundary(sink, tag)

    def _boundary(self, sink: _Sink, tag: str) -> None:
        if tag in BLOCKISH_TAGS:
            sink.flush()

    def _textblock(self, element, sink: _Sink, kind: NodeKind, attrs: dict, marks: Tuple[Mark, ...],
                   report: ParseReport, location: str) -> None:
        inner = _Sink(kind, attrs, explicit=True)
        self._walk(element, inner, marks, report, location)
        sink.flush()
        sink.blocks.extend(inner.finish())

    def _container(self, element, report: ParseReport, location: str) -> List[Node]:
        inner = _Sink()
        self._walk(element, inner, (), report, location)
        return inner.finish() or [Node(kind=NodeKind.PARAGRAPH)]

    def _code_block(self, element) -> Node:
        attrs = {}
        code = element.find("code")
        classes = (code.get("class", "") if code is not None else "").split()
        for name in classes:
            if name.startswith("language-") and len(name) > len("language-"):
                attrs["language"] = name[len("language-"):]
                break
        text = _CONTROL_CHARS.sub("", element.text_content())
        children = (text_node(text),) if text else ()
        return Node(kind=NodeKind.CODE_BLOCK, attrs=attrs, children=children)

    def _list(self, element, sink: _Sink, report: ParseReport, location: str) -> None:
        kind = NodeKind.ORDERED_LIST if element.tag.lower() == "ol" else NodeKind.BULLET_LIST
        items = []
        for index, child in enumerate(element):
            if not isinstance(child.tag, str):
                continue
            child_location = f"{location}/{index}"
            if child.tag.lower() == "li":
                children = self._container(child, report, child_location)
            else:
                holder = _Sink()
                self._element(child, holder, (), report, child_location)
                children = holder.finish()
                if not children:
                    continue
            items.append(Node(kind=NodeKind.LIST_ITEM, children=tuple(children)))

        if not items:
            report.dropped(element.tag.lower(), location, "list without items")
            return
        attrs = {}
        start = (element.get("start") or "").strip()
        if kind == NodeKind.ORDERED_LIST and start.isdigit() and int(start) != 1:
            attrs["start"] = int(start)
        sink.block(Node(kind=kind, attrs=attrs, children=tuple(items)))

    def _media(self, element, tag: str, report: ParseReport, location: str) -> Optional[Node]:
        src = (element.get("src") or "").strip()
        if tag == "video" and not src:
            source = element.find("source")
            src = (source.get("src") or "").strip() if source is not None else ""
        if not src or _UNSAFE_HREF.match(src):
            report.dropped(tag, location, "missing or unsafe src")
            return None
        src = canonical_url(src)

        if tag == "img":
            attrs = {"src": src}
            for name in ("alt", "title"):
                if element.get(name):
                    attrs[name] = element.get(name)
            return Node(kind=NodeKind.IMAGE, attrs=attrs)

        if tag == "video":
            return Node(kind=NodeKind.VIDEO, attrs={
                "src": src,
                "controls": "controls" in element.attrib,
                "width": element.get("width") or "100%",
                "height": element.get("height") or "auto",
            })

        if not is_youtube_url(src):
            logger.warning(f"Dropping non-YouTube iframe at {location}: {src}")
            report.dropped(tag, location, "iframe is not a YouTube embed")
            return None

        return Node(kind=NodeKind.YOUTUBE, attrs={
            "src": src,
            "width": _int_attr(element.get("width"), YOUTUBE_WIDTH),
            "height": _int_attr(element.get("height"), YOUTUBE_HEIGHT),
            "frameborder": element.get("frameborder") or "0",
            "allow": element.get("allow") or YOUTUBE_ALLOW,
            "allowfullscreen": "allowfullscreen" in element.attrib,
        })

    def _plain_text(self, text: str) -> Document:
        lines = [_CONTROL_CHARS.sub("", line).strip() for line in re.sub(r"<[^>]*>", "\n", text).splitlines()]
        blocks = tuple(Node(kind=NodeKind.PARAGRAPH, children=(text_node(line),)) for line in lines if line)
        return Document(blocks=blocks) if blocks else Document.create_empty()


def _marks_for(element, tag: str) -> Optional[Tuple[Mark, ...]]:
    """Marks an inline element stands for, or None when it is not a mark element."""
    simple = {
        "strong": MarkKind.BOLD, "b": MarkKind.BOLD,
        "em": MarkKind.ITALIC, "i": MarkKind.ITALIC,
        "u": MarkKind.UNDERLINE,
        "s": MarkKind.STRIKE, "strike": MarkKind.STRIKE, "del": MarkKind.STRIKE,
        "sub": MarkKind.SUBSCRIPT,
        "sup": MarkKind.SUPERSCRIPT,
        "code": MarkKind.CODE,
    }
    if tag in simple:
        return (Mark(simple[tag]),)

    if tag == "a":
        href = (element.get("href") or "").strip()
        if not href or _UNSAFE_HREF.match(href):
            return ()
        return (Mark(MarkKind.LINK, canonical_url(href)),)

    styles = _parse_style(element.get("style"))
    if tag == "mark":
        color = element.get("data-color") or styles.get("background-color")
        return (Mark(MarkKind.HIGHLIGHT, color or None),)

    if tag == "span":
        found = []
        if styles.get("color"):
            found.append(Mark(MarkKind.TEXT_COLOR, styles["color"]))
        if styles.get("font-family"):
            found.append(Mark(MarkKind.FONT_FAMILY, styles["font-family"]))
        if styles.get("background-color"):
            found.append(Mark(MarkKind.HIGHLIGHT, styles["background-color"]))
        return tuple(found) if found else None
    return None


def _parse_style(style: Optional[str]) -> Dict[str, str]:
    result = {}
    for declaration in (style or "").split(";"):
        name, sep, value = declaration.partition(":")
        if sep and value.strip():
            result[name.strip().lower()] = value.strip()
    return result


def _align_attrs(element) -> dict:
    align = _parse_style(element.get("style")).get("text-align")
    return {"textAlign": align} if align in ALIGN_VALUES else {}


def _int_attr(value: Optional[str], default: int) -> int:
    value = (value or "").strip()
    return int(value) if value.isdigit() and int(value) > 0 else default


def _strip_edges(runs: List[Node]) -> List[Node]:
    """Trim whitespace at both ends of an implicit paragraph."""
    runs = [run for run in runs if run.text]
    if runs:
        runs[0] = replace(runs[0], text=runs[0].text.lstrip())
    if runs:
        runs[-1] = replace(runs[-1], text=runs[-1].text.rstrip())
    return [run for run in runs if run.text]


def deserialize(html: Optional[str], unknown_tag_policy: UnknownTagPolicy = UnknownTagPolicy.UNWRAP,
                report: Optional[ParseReport] = None) -> Document:
    """Parse `html` into a Document."""
    return HtmlDeserializer(unknown_tag_policy).deserialize(html, report)
