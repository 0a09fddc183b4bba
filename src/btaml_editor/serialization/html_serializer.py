"""Renders a Document to the HTML interchange string."""

from typing import List, Tuple

from lxml import etree
import lxml.html

from ..models.document import Document, Mark, Node
from ..models.enums import MarkKind, NodeKind

LINK_TARGET = "_blank"
LINK_REL = "noopener noreferrer nofollow"

_SIMPLE_MARK_TAGS = {
    MarkKind.BOLD: "strong",
    MarkKind.ITALIC: "em",
    MarkKind.UNDERLINE: "u",
    MarkKind.STRIKE: "s",
    MarkKind.SUBSCRIPT: "sub",
    MarkKind.SUPERSCRIPT: "sup",
    MarkKind.CODE: "code",
}

_SIMPLE_BLOCK_TAGS = {
    NodeKind.PARAGRAPH: "p",
    NodeKind.BULLET_LIST: "ul",
    NodeKind.ORDERED_LIST: "ol",
    NodeKind.LIST_ITEM: "li",
    NodeKind.BLOCKQUOTE: "blockquote",
}


class HtmlSerializer:
    """
    Serializes documents to HTML.

    Traversal is depth-first and deterministic. Marks nest in canonical
    order (link outermost, then bold, italic, underline, strike, subscript,
    superscript, code, text color, font family and highlight innermost),
    and neighbouring text runs share the elements of their common leading
    marks, so equal documents always produce equal strings.
    """

    def serialize(self, doc: Document) -> str:
        return "".join(self.serialize_node(block) for block in doc.blocks)

    def serialize_node(self, node: Node) -> str:
        return lxml.html.tostring(self.build(node), encoding="unicode", method="html")

    def build(self, node: Node) -> etree._Element:
        """Build the element tree for a block node."""
        kind = node.kind
        if kind == NodeKind.HEADING:
            element = etree.Element(f"h{node.attr('level')}")
        elif kind == NodeKind.CODE_BLOCK:
            return self._code_block(node)
        elif kind == NodeKind.IMAGE:
            return self._media("img", node, ("src", "alt", "title"))
        elif kind == NodeKind.VIDEO:
            return self._video(node)
        elif kind == NodeKind.YOUTUBE:
            return self._youtube(node)
        else:
            element = etree.Element(_SIMPLE_BLOCK_TAGS[kind])

        if node.attr("textAlign"):
            element.set("style", f"text-align: {node.attr('textAlign')}")
        if kind == NodeKind.ORDERED_LIST and node.attr("start", 1) != 1:
            element.set("start", str(node.attr("start")))

        if node.is_textblock:
            self._inline(element, node.children)
        else:
            for child in node.children:
                element.append(self.build(child))
        return element

    def _code_block(self, node: Node) -> etree._Element:
        pre = etree.Element("pre")
        code = etree.SubElement(pre, "code")
        if node.attr("language"):
            code.set("class", f"language-{node.attr('language')}")
        code.text = node.text_content()
        return pre

    def _media(self, tag: str, node: Node, names: Tuple[str, ...]) -> etree._Element:
        element = etree.Element(tag)
        for name in names:
            value = node.attr(name)
            if value is not None and value != "":
                element.set(name, str(value))
        return element

    def _video(self, node: Node) -> etree._Element:
        element = self._media("video", node, ("src",))
        if node.attr("controls", True):
            element.set("controls", "true")
        element.set("width", str(node.attr("width", "100%")))
        element.set("height", str(node.attr("height", "auto")))
        return element

    def _youtube(self, node: Node) -> etree._Element:
        element = self._media("iframe", node, ("src", "width", "height", "frameborder", "allow"))
        if node.attr("allowfullscreen"):
            element.set("allowfullscreen", "true")
        return element

    def _inline(self, block: etree._Element, children: Tuple[Node, ...]) -> None:
        # Open elements for the marks of the previous run, outermost first.
        stack: List[Tuple[Mark, etree._Element]] = []
        for run in children:
            shared = 0
            while shared < len(stack) and shared < len(run.marks) and stack[shared][0] == run.marks[shared]:
                shared += 1
            del stack[shared:]
            for mark in run.marks[shared:]:
                parent = stack[-1][1] if stack else block
                stack.append((mark, self._mark_element(parent, mark)))
            _append_text(stack[-1][1] if stack else block, run.text)

    def _mark_element(self, parent: etree._Element, mark: Mark) -> etree._Element:
        kind = mark.kind
        if kind in _SIMPLE_MARK_TAGS:
            return etree.SubElement(parent, _SIMPLE_MARK_TAGS[kind])
        if kind == MarkKind.LINK:
            return etree.SubElement(parent, "a", href=mark.value, target=LINK_TARGET, rel=LINK_REL)
        if kind == MarkKind.TEXT_COLOR:
            return etree.SubElement(parent, "span", style=f"color: {mark.value}")
        if kind == MarkKind.FONT_FAMILY:
            return etree.SubElement(parent, "span", style=f"font-family: {mark.value}")
        element = etree.SubElement(parent, "mark")
        if mark.value:
            element.set("data-color", mark.value)
            element.set("style", f"background-color: {mark.value}; color: inherit")
        return element


def _append_text(element: etree._Element, text: str) -> None:
    if len(element):
        last = element[-1]
        last.tail = (last.tail or "") + text
    else:
        element.text = (element.text or "") + text


def serialize(doc: Document) -> str:
    """Render `doc` as an HTML string."""
    return HtmlSerializer().serialize(doc)
