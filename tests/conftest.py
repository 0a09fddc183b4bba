"""Shared fixtures and helpers for the editor tests."""

import pytest

from btaml_editor.commands.state import EditorState
from btaml_editor.models.document import Document, Mark, Node, paragraph, text_node
from btaml_editor.models.enums import MarkKind, NodeKind
from btaml_editor.models.selection import Position, Selection


def make_state(doc, anchor=((0,), 0), head=None):
    """EditorState over `doc` with a selection given as (path, offset) pairs."""
    head = anchor if head is None else head
    return EditorState(
        doc=doc,
        selection=Selection(Position(tuple(anchor[0]), anchor[1]), Position(tuple(head[0]), head[1])),
    )


def text_of(doc):
    """Text of each root block, for compact assertions."""
    return [block.text_content() for block in doc.blocks]


@pytest.fixture
def hello_doc():
    """Single paragraph reading 'Hello world'."""
    return Document.of(paragraph(text_node("Hello world")))


@pytest.fixture
def two_paragraphs():
    return Document.of(paragraph(text_node("First")), paragraph(text_node("Second")))


@pytest.fixture
def bold():
    return Mark(MarkKind.BOLD)


@pytest.fixture
def list_doc():
    """Bullet list with two items followed by a paragraph."""
    items = tuple(
        Node(kind=NodeKind.LIST_ITEM, children=(paragraph(text_node(label)),))
        for label in ("one", "two")
    )
    return Document.of(
        Node(kind=NodeKind.BULLET_LIST, children=items),
        paragraph(text_node("after")),
    )
