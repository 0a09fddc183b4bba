"""Unit tests for JSON serialization and plain text helpers."""

import json

import pytest

from btaml_editor.commands import EditorState, toggle_mark
from btaml_editor.models import (
    Document,
    InvalidArgument,
    Mark,
    MarkKind,
    Node,
    NodeKind,
    Position,
    SchemaViolation,
    Selection,
    heading,
    paragraph,
    text_node,
)
from btaml_editor.serialization import (
    DocumentSerializer,
    deserialize_document,
    generate_excerpt,
    selection_from_dict,
    serialize_document,
    state_to_dict,
    to_plain_text,
)

from conftest import make_state


@pytest.fixture
def rich_doc():
    return Document.of(
        heading(1, text_node("Title")),
        paragraph(text_node("see "), text_node("here", [Mark(MarkKind.LINK, "https://example.com")])),
        Node(kind=NodeKind.YOUTUBE, attrs={"src": "https://www.youtube.com/embed/abc", "width": 560,
                                           "height": 315, "allowfullscreen": True}),
    )


class TestDocumentSerializer:
    """Tests for the JSON document form."""

    def test_shape(self, rich_doc):
        """Documents serialize to nested type/attrs/content dictionaries."""
        data = DocumentSerializer.doc_to_dict(rich_doc)

        assert data["type"] == "doc"
        assert data["content"][0] == {"type": "heading", "attrs": {"level": 1},
                                      "content": [{"type": "text", "text": "Title"}]}
        assert data["content"][1]["content"][1]["marks"] == [
            {"type": "link", "attrs": {"value": "https://example.com"}}
        ]

    def test_round_trip(self, rich_doc):
        assert deserialize_document(serialize_document(rich_doc)) == rich_doc

    def test_invalid_json(self):
        with pytest.raises(InvalidArgument):
            deserialize_document("{not json")

    def test_unknown_node_type(self):
        with pytest.raises(SchemaViolation):
            deserialize_document(json.dumps({"type": "doc", "content": [{"type": "table"}]}))

    def test_schema_checked_on_load(self):
        """Loaded trees must obey containment rules."""
        data = {"type": "doc", "content": [{"type": "listItem", "content": [{"type": "paragraph"}]}]}

        with pytest.raises(SchemaViolation):
            DocumentSerializer.dict_to_doc(data)

    def test_empty_content_loads_empty_document(self):
        assert DocumentSerializer.dict_to_doc({"type": "doc", "content": []}) == Document.create_empty()

    def test_marks_put_in_canonical_order(self, bold):
        """Marks given in any order load as the equal canonical document."""
        data = {"type": "doc", "content": [{"type": "paragraph", "content": [
            {"type": "text", "text": "ab", "marks": [{"type": "underline"}, {"type": "bold"}]},
            {"type": "text", "text": "cd", "marks": [{"type": "bold"}, {"type": "underline"}]},
        ]}]}

        doc = DocumentSerializer.dict_to_doc(data)

        assert doc == Document.of(paragraph(text_node("abcd", [bold, Mark(MarkKind.UNDERLINE)])))
        assert deserialize_document(serialize_document(doc)) == doc


class TestStateSerialization:
    """Tests for editor state and selections."""

    def test_state_to_dict(self, hello_doc):
        state = toggle_mark(make_state(hello_doc, ((0,), 2)), MarkKind.BOLD)

        data = state_to_dict(state)

        assert data["selection"] == {"anchor": {"path": [0], "offset": 2}, "head": {"path": [0], "offset": 2}}
        assert data["stored_marks"] == [{"type": "bold"}]

    def test_stored_marks_omitted_when_unset(self, hello_doc):
        assert "stored_marks" not in state_to_dict(EditorState.create(hello_doc))

    def test_selection_from_dict(self):
        """A missing head collapses onto the anchor."""
        selection = selection_from_dict({"anchor": {"path": [1, 0], "offset": 3}})

        assert selection == Selection(Position((1, 0), 3), Position((1, 0), 3))

    def test_malformed_selection(self):
        with pytest.raises(InvalidArgument):
            selection_from_dict({"head": {"path": [0]}})


class TestPlainText:
    """Tests for plain text and excerpts."""

    def test_plain_text_skips_media(self, rich_doc):
        assert to_plain_text(rich_doc) == "Title\nsee here"

    def test_short_excerpt_unchanged(self, rich_doc):
        assert generate_excerpt(rich_doc) == "Title see here"

    def test_long_excerpt_truncated(self):
        doc = Document.of(paragraph(text_node("word " * 50)))

        excerpt = generate_excerpt(doc, length=20)

        assert excerpt == "word word word word ..."
