"""Unit tests for HTML serialization and the round-trip law."""

import random

import pytest

from btaml_editor.commands import (
    EditorState,
    create_default_registry,
    insert_image,
    insert_text,
    insert_video,
    insert_youtube,
    set_heading,
    set_highlight,
    set_link,
    set_text_align,
    set_text_color,
    split_block,
    toggle_blockquote,
    toggle_bullet_list,
    toggle_code_block,
    toggle_mark,
)
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
    create_empty,
    heading,
    paragraph,
    text_node,
)
from btaml_editor.models.tree import end_of, leaves
from btaml_editor.serialization import HtmlSerializer, deserialize, serialize

from conftest import make_state

LINK = Mark(MarkKind.LINK, "https://example.com")
LINK_ATTRS = 'href="https://example.com" target="_blank" rel="noopener noreferrer nofollow"'


def item(*blocks):
    return Node(kind=NodeKind.LIST_ITEM, children=blocks)


class TestBlocks:
    """Tests for block elements."""

    def test_empty_document(self):
        """An empty document is one empty paragraph."""
        assert serialize(create_empty()) == "<p></p>"

    def test_paragraphs_are_concatenated(self, two_paragraphs):
        """Blocks are emitted back to back without separators."""
        assert serialize(two_paragraphs) == "<p>First</p><p>Second</p>"

    def test_heading_with_alignment(self):
        """Alignment becomes an inline text-align style."""
        doc = Document.of(heading(2, text_node("Title"), textAlign="center"))

        assert serialize(doc) == '<h2 style="text-align: center">Title</h2>'

    def test_lists(self):
        """Ordered lists only carry start when it is not 1."""
        doc = Document.of(
            Node(kind=NodeKind.BULLET_LIST, children=(item(paragraph(text_node("a"))),)),
            Node(kind=NodeKind.ORDERED_LIST, attrs={"start": 3}, children=(item(paragraph(text_node("b"))),)),
            Node(kind=NodeKind.ORDERED_LIST, attrs={"start": 1}, children=(item(paragraph(text_node("c"))),)),
        )

        assert serialize(doc) == (
            "<ul><li><p>a</p></li></ul>"
            '<ol start="3"><li><p>b</p></li></ol>'
            "<ol><li><p>c</p></li></ol>"
        )

    def test_blockquote(self):
        doc = Document.of(Node(kind=NodeKind.BLOCKQUOTE, children=(paragraph(text_node("quoted")),)))

        assert serialize(doc) == "<blockquote><p>quoted</p></blockquote>"

    def test_code_block(self):
        """Code blocks are a pre element wrapping a code element."""
        doc = Document.of(Node(kind=NodeKind.CODE_BLOCK, attrs={"language": "python"},
                               children=(text_node("if a < b:\n    pass"),)))

        assert serialize(doc) == '<pre><code class="language-python">if a &lt; b:\n    pass</code></pre>'

    def test_text_is_escaped(self):
        """Markup characters in text never become markup."""
        doc = Document.of(paragraph(text_node("<script>alert(1)</script> & co")))

        assert serialize(doc) == "<p>&lt;script&gt;alert(1)&lt;/script&gt; &amp; co</p>"


class TestMedia:
    """Tests for atomic media elements."""

    def test_image(self):
        doc = Document.of(Node(kind=NodeKind.IMAGE, attrs={"src": "/a.png", "alt": "A cat"}))

        assert serialize(doc) == '<img src="/a.png" alt="A cat">'

    def test_video(self):
        """Videos always carry controls and dimensions."""
        state = insert_video(make_state(create_empty()), "/v.mp4")

        assert serialize(state.doc) == '<video src="/v.mp4" controls="true" width="100%" height="auto"></video>'

    def test_youtube(self):
        """Embeds carry the full iframe attribute set."""
        state = insert_youtube(make_state(create_empty()), "https://youtu.be/abc123")

        html = serialize(state.doc)

        assert html.startswith(
            '<iframe src="https://www.youtube.com/embed/abc123" width="560" height="315" frameborder="0" allow="'
        )
        assert html.endswith(' allowfullscreen="true"></iframe>')


class TestMarks:
    """Tests for inline mark elements."""

    def test_simple_marks(self, bold):
        doc = Document.of(paragraph(text_node("Hello", [bold]), text_node(" world")))

        assert serialize(doc) == "<p><strong>Hello</strong> world</p>"

    def test_canonical_nesting(self):
        """Links wrap bold, which wraps italic, whatever order marks were added in."""
        doc = Document.of(paragraph(text_node("x", [Mark(MarkKind.ITALIC), LINK, Mark(MarkKind.BOLD)])))

        assert serialize(doc) == f"<p><a {LINK_ATTRS}><strong><em>x</em></strong></a></p>"

    def test_neighbours_share_common_marks(self, bold):
        """Adjacent runs reuse the element of their shared outer mark."""
        doc = Document.of(paragraph(text_node("a", [bold, Mark(MarkKind.ITALIC)]), text_node("b", [bold])))

        assert serialize(doc) == "<p><strong><em>a</em>b</strong></p>"

    def test_value_marks(self):
        """Color, font and highlight marks become styled spans and mark elements."""
        doc = Document.of(paragraph(
            text_node("red", [Mark(MarkKind.TEXT_COLOR, "#ff0000")]),
            text_node("serif", [Mark(MarkKind.FONT_FAMILY, "Georgia")]),
            text_node("lit", [Mark(MarkKind.HIGHLIGHT, "yellow")]),
            text_node("plain", [Mark(MarkKind.HIGHLIGHT)]),
        ))

        assert serialize(doc) == (
            '<p><span style="color: #ff0000">red</span>'
            '<span style="font-family: Georgia">serif</span>'
            '<mark data-color="yellow" style="background-color: yellow; color: inherit">lit</mark>'
            "<mark>plain</mark></p>"
        )

    def test_serializer_is_deterministic(self, bold):
        """Equal documents always produce equal strings."""
        first = Document.of(paragraph(text_node("a", [bold, Mark(MarkKind.UNDERLINE)])))
        second = Document.of(paragraph(text_node("a", [Mark(MarkKind.UNDERLINE), bold])))

        assert first == second
        assert HtmlSerializer().serialize(first) == HtmlSerializer().serialize(second)


def _edited_document():
    """Document produced by a realistic sequence of editing commands."""
    state = make_state(create_empty())
    state = insert_text(state, "Breaking news")
    state = set_heading(state, 1)
    state = split_block(state)
    state = insert_text(state, "Markets rallied today.")
    state = state.with_selection(Selection(Position((1,), 0), Position((1,), 7)))
    state = toggle_mark(state, MarkKind.BOLD)
    state = set_text_color(state, "#336699")
    state = set_link(state, "https://example.com/markets")
    state = set_text_align(state, "justify")
    state = state.with_selection(Selection.cursor((1,), 22))
    state = split_block(state)
    state = insert_text(state, "First point")
    state = toggle_bullet_list(state)
    state = split_block(state)
    state = insert_text(state, "Second point")
    state = state.with_selection(Selection.cursor((2, 1, 0), 0))
    state = toggle_mark(state, MarkKind.ITALIC)
    state = insert_text(state, "Key: ")
    state = state.with_selection(Selection(end_of(state.doc), end_of(state.doc)))
    state = split_block(state)
    state = split_block(state)
    state = insert_text(state, "print('hi')")
    state = toggle_code_block(state, "python")
    state = insert_image(state, "/media/articles/chart.png", alt="Chart")
    state = insert_youtube(state, "https://www.youtube.com/watch?v=abc123&t=5s")
    state = insert_video(state, "/media/articles/clip.mp4", width=640)
    state = insert_text(state, "A quoted line with a highlight")
    state = toggle_blockquote(state)
    head = state.selection.head
    state = state.with_selection(Selection(Position(head.path, 21), head))
    state = set_highlight(state, "yellow")
    return state.doc


class TestRoundTrip:
    """deserialize(serialize(doc)) == doc for every reachable document."""

    @pytest.mark.parametrize("doc", [
        create_empty(),
        Document.of(paragraph(text_node("  spaced  out  "))),
        Document.of(paragraph(text_node("a", [Mark(MarkKind.SUBSCRIPT)]), text_node("b", [Mark(MarkKind.SUPERSCRIPT)]))),
        Document.of(Node(kind=NodeKind.ORDERED_LIST, attrs={"start": 4},
                         children=(item(paragraph(text_node("x")), Node(kind=NodeKind.BULLET_LIST,
                                                                         children=(item(paragraph(text_node("y"))),))),))),
        Document.of(paragraph(text_node("code", [Mark(MarkKind.CODE), Mark(MarkKind.STRIKE), Mark(MarkKind.UNDERLINE)]))),
    ])
    def test_hand_built_documents(self, doc):
        assert deserialize(serialize(doc)) == doc

    def test_command_built_document(self):
        """A document built only through commands survives the round trip."""
        doc = _edited_document()

        kinds = {node.kind for node in doc.depth_first()}
        assert {NodeKind.HEADING, NodeKind.BULLET_LIST, NodeKind.CODE_BLOCK, NodeKind.IMAGE,
                NodeKind.YOUTUBE, NodeKind.VIDEO, NodeKind.BLOCKQUOTE} <= kinds
        assert deserialize(serialize(doc)) == doc

    def test_serialize_is_stable(self):
        """Serializing a parsed document reproduces the same string."""
        html = serialize(_edited_document())

        assert serialize(deserialize(html)) == html

    @pytest.mark.parametrize("href, stored", [
        ("https://example.com/café", "https://example.com/caf%C3%A9"),
        ("https://example.com/a b", "https://example.com/a%20b"),
        ("https://example.com/search?q=naïve&page=2", "https://example.com/search?q=na%C3%AFve&page=2"),
    ])
    def test_links_with_unescaped_characters(self, hello_doc, href, stored):
        """Links are stored in the escaped form the HTML carries."""
        state = set_link(make_state(hello_doc, ((0,), 0), ((0,), 5)), href)

        assert state.doc.blocks[0].children[0].marks == (Mark(MarkKind.LINK, stored),)
        assert deserialize(serialize(state.doc)) == state.doc

    def test_image_with_space_in_src(self, hello_doc):
        state = insert_image(make_state(hello_doc, ((0,), 11)), "https://example.com/my photo.png")

        assert state.doc.blocks[1].attr("src") == "https://example.com/my%20photo.png"
        assert deserialize(serialize(state.doc)) == state.doc


WORDS = ["news", "café", "a b", "Key: ", "x = 1", "naïve"]
URLS = ["https://example.com", "https://example.com/café", "https://example.com/a b", "mailto:desk@example.com"]
MEDIA = ["/media/articles/chart.png", "https://example.com/my photo.png", "/media/clip one.mp4"]


def _random_params(rng, name):
    """Parameters for `name`, sometimes out of range so the command rejects them."""
    if name in ("setHeading", "toggleHeading"):
        return {"level": rng.randint(0, 7)}
    if name == "toggleCodeBlock":
        return rng.choice([{}, {"language": "python"}])
    if name == "setTextAlign":
        return {"direction": rng.choice(["left", "center", "right", "justify", "middle"])}
    if name == "setTextColor":
        return {"value": rng.choice(["#336699", "red", "bad;color"])}
    if name == "setHighlight":
        return rng.choice([{}, {"value": "yellow"}])
    if name == "setFontFamily":
        return {"value": rng.choice(["Georgia", "Arial"])}
    if name == "setLink":
        return {"href": rng.choice(URLS + ["javascript:alert(1)"])}
    if name == "insertText":
        return {"text": rng.choice(WORDS)}
    if name == "insertImage":
        return {"src": rng.choice(MEDIA), "alt": rng.choice([None, "Chart"])}
    if name == "insertVideo":
        return {"src": rng.choice(MEDIA)}
    if name == "insertYouTube":
        return {"src": rng.choice(["https://youtu.be/abc123", "https://www.youtube.com/watch?v=xyz", "https://vimeo.com/1"])}
    return {}


def _random_selection(rng, doc):
    """Selection between two random positions inside the leaf blocks of `doc`."""
    targets = leaves(doc)

    def position():
        path, node = rng.choice(targets)
        return Position(path, rng.randint(0, node.content_size) if node.is_textblock else 0)

    anchor = position()
    head = anchor if rng.random() < 0.4 else position()
    return Selection(anchor, head)


class TestRandomEditing:
    """The round-trip law after every step of random command sequences."""

    COMMANDS = [
        "toggleBold", "toggleItalic", "toggleUnderline", "toggleStrike", "toggleCode",
        "toggleSubscript", "toggleSuperscript", "setParagraph", "setHeading", "toggleHeading",
        "toggleBulletList", "toggleOrderedList", "toggleBlockquote", "toggleCodeBlock",
        "setTextAlign", "unsetTextAlign", "setTextColor", "unsetTextColor", "setHighlight",
        "unsetHighlight", "setFontFamily", "unsetAllMarks", "setLink", "unsetLink",
        "insertText", "insertText", "insertText", "splitBlock", "splitBlock", "deleteSelection",
        "selectAll", "insertImage", "insertVideo", "insertYouTube",
    ]

    @pytest.mark.parametrize("seed", range(12))
    def test_every_step_round_trips(self, seed):
        rng = random.Random(seed)
        registry = create_default_registry()
        state = EditorState.create(create_empty())

        for step in range(60):
            if rng.random() < 0.5:
                state = state.with_selection(_random_selection(rng, state.doc))
            name = rng.choice(self.COMMANDS)
            try:
                result = registry.apply(state, name, _random_params(rng, name))
            except (InvalidArgument, SchemaViolation):
                result = None
            if result is not None:
                state = result

            assert deserialize(serialize(state.doc)) == state.doc, f"seed {seed}, step {step}: {name}"
