"""Unit tests for list commands."""

import pytest

from btaml_editor.commands import is_active, toggle_bullet_list, toggle_ordered_list
from btaml_editor.models import Document, Node, NodeKind, Position, paragraph, text_node, validate_document

from conftest import make_state, text_of


def bullet_list(*labels):
    return Node(
        kind=NodeKind.BULLET_LIST,
        children=tuple(Node(kind=NodeKind.LIST_ITEM, children=(paragraph(text_node(label)),)) for label in labels),
    )


@pytest.fixture
def three_items():
    return Document.of(bullet_list("a", "b", "c"))


class TestWrap:
    """Tests for wrapping blocks in lists."""

    def test_wrap_paragraph(self, hello_doc):
        """A paragraph becomes the only item of a new list."""
        state = make_state(hello_doc, ((0,), 4))

        result = toggle_bullet_list(state)

        block = result.doc.blocks[0]
        assert block.kind == NodeKind.BULLET_LIST
        assert block.children[0].kind == NodeKind.LIST_ITEM
        assert result.selection.head == Position((0, 0, 0), 4)
        assert is_active(result, "bulletList")
        validate_document(result.doc)

    def test_toggle_twice_restores_document(self, hello_doc):
        """Lifting the only item out of a list removes the list."""
        state = make_state(hello_doc, ((0,), 4))

        result = toggle_bullet_list(toggle_bullet_list(state))

        assert result.doc == hello_doc
        assert result.selection.head == Position((0,), 4)

    def test_wrap_range_one_item_per_block(self, two_paragraphs):
        """Each selected block becomes its own item."""
        state = make_state(two_paragraphs, ((0,), 0), ((1,), 0))

        result = toggle_ordered_list(state)

        assert len(result.doc.blocks) == 1
        ordered = result.doc.blocks[0]
        assert ordered.kind == NodeKind.ORDERED_LIST
        assert [item.text_content() for item in ordered.children] == ["First", "Second"]

    def test_wrap_merges_existing_items(self, list_doc):
        """Selecting across a list and a paragraph folds both into one list."""
        state = make_state(list_doc, ((0, 1, 0), 0), ((1,), 2))

        result = toggle_bullet_list(state)

        assert len(result.doc.blocks) == 1
        assert [item.text_content() for item in result.doc.blocks[0].children] == ["one", "two", "after"]
        assert result.selection.head == Position((0, 2, 0), 2)


class TestUnwrap:
    """Tests for lifting items out of lists."""

    def test_unwrap_middle_item_splits_list(self, three_items):
        """Items before and after the lifted one stay in their own lists."""
        state = make_state(three_items, ((0, 1, 0), 0))

        result = toggle_bullet_list(state)

        assert [b.kind for b in result.doc.blocks] == [
            NodeKind.BULLET_LIST,
            NodeKind.PARAGRAPH,
            NodeKind.BULLET_LIST,
        ]
        assert text_of(result.doc) == ["a", "b", "c"]
        assert result.selection.head == Position((1,), 0)

    def test_unwrap_first_item(self, three_items):
        """Lifting the first item leaves the rest of the list after it."""
        state = make_state(three_items, ((0, 0, 0), 1))

        result = toggle_bullet_list(state)

        assert [b.kind for b in result.doc.blocks] == [NodeKind.PARAGRAPH, NodeKind.BULLET_LIST]
        assert result.selection.head == Position((0,), 1)


class TestRetype:
    """Tests for switching list kinds."""

    def test_bullet_to_ordered(self, list_doc):
        """Toggling the other list kind converts the whole list."""
        state = make_state(list_doc, ((0, 1, 0), 1))

        result = toggle_ordered_list(state)

        assert result.doc.blocks[0].kind == NodeKind.ORDERED_LIST
        assert len(result.doc.blocks[0].children) == 2
        assert result.selection == state.selection
        assert is_active(result, "orderedList")

    def test_ordered_start_dropped_on_bullet(self):
        """Bullet lists carry no start number."""
        ordered = Node(
            kind=NodeKind.ORDERED_LIST,
            attrs={"start": 3},
            children=(Node(kind=NodeKind.LIST_ITEM, children=(paragraph(text_node("x")),)),),
        )
        state = make_state(Document.of(ordered), ((0, 0, 0), 0))

        result = toggle_bullet_list(state)

        assert result.doc.blocks[0].kind == NodeKind.BULLET_LIST
        assert result.doc.blocks[0].attrs == {}
