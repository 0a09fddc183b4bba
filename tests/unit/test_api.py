"""Unit tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from btaml_editor.api.app import create_app
from btaml_editor.config import EditorConfig
from btaml_editor.interfaces import IMediaUploadGateway
from btaml_editor.models import UploadError
from btaml_editor.storage import DatabaseManager, SqlArticleStore


class RecordingGateway(IMediaUploadGateway):
    """Returns a fixed URL per upload, or rejects everything."""

    def __init__(self, reject=False):
        self.reject = reject
        self.uploads = []

    async def upload(self, data, filename, content_type, kind):
        if self.reject:
            raise UploadError("too big", details={"user_message": "Image size should be less than 5MB"})
        self.uploads.append((filename, kind))
        return f"https://cdn.example.com/{filename}"


@pytest.fixture
def store():
    db_manager = DatabaseManager(database_url="sqlite:///:memory:", pool_size=1, max_overflow=0)
    db_manager.init_database()
    yield SqlArticleStore(db_manager)
    db_manager.close()


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def client(store, gateway):
    app = create_app(EditorConfig(history_depth=20), store=store, gateway=gateway)
    return TestClient(app)


def open_session(client, html=None):
    body = {"html": html} if html is not None else None
    response = client.post("/api/sessions", json=body)
    assert response.status_code == 201
    return response.json()


def select(client, session_id, anchor, head=None):
    payload = {"anchor": {"path": anchor[0], "offset": anchor[1]}}
    if head is not None:
        payload["head"] = {"path": head[0], "offset": head[1]}
    return client.put(f"/api/sessions/{session_id}/selection", json=payload)


class TestSessions:
    """Tests for opening and reading sessions."""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_create_empty_session(self, client):
        """An empty session holds one empty paragraph."""
        data = open_session(client)

        assert data["html"] == "<p></p>"
        assert data["can_undo"] is False
        assert data["parse_report"]["issue_count"] == 0
        assert data["toolbar"]["heading_level"] == 0

    def test_create_with_html(self, client):
        data = open_session(client, "<h1>Title</h1><script>x()</script>")

        assert data["html"] == "<h1>Title</h1>"
        assert data["parse_report"]["issues"][0]["tag"] == "script"

    def test_get_and_close(self, client):
        session_id = open_session(client)["id"]

        assert client.get(f"/api/sessions/{session_id}").status_code == 200
        assert client.delete(f"/api/sessions/{session_id}").json() == {"id": session_id, "closed": True}
        assert client.get(f"/api/sessions/{session_id}").status_code == 404
        assert client.delete(f"/api/sessions/{session_id}").status_code == 404

    def test_stale_selection(self, client):
        session_id = open_session(client, "<p>Hi</p>")["id"]

        response = select(client, session_id, ([3, 1], 4))

        assert response.json()["selection"]["head"] == {"path": [0], "offset": 0}


class TestCommands:
    """Tests for command dispatch over HTTP."""

    def test_toggle_bold(self, client):
        session_id = open_session(client, "<p>Hello world</p>")["id"]
        select(client, session_id, ([0], 0), ([0], 5))

        response = client.post(f"/api/sessions/{session_id}/commands", json={"name": "toggleBold"})

        data = response.json()
        assert data["applied"] is True
        assert data["html"] == "<p><strong>Hello</strong> world</p>"
        assert data["toolbar"]["pressed"]["bold"] is True
        assert data["can_undo"] is True

    def test_undo(self, client):
        session_id = open_session(client, "<p>Hello</p>")["id"]
        client.post(f"/api/sessions/{session_id}/commands", json={"name": "setHeading", "params": {"level": 3}})

        response = client.post(f"/api/sessions/{session_id}/commands", json={"name": "undo"})

        assert response.json()["html"] == "<p>Hello</p>"

    def test_inapplicable_command(self, client):
        """A command with nothing to do succeeds without changing anything."""
        session_id = open_session(client, "<p>Hello</p>")["id"]

        response = client.post(f"/api/sessions/{session_id}/commands", json={"name": "setParagraph"})

        assert response.status_code == 200
        assert response.json()["applied"] is False

    def test_invalid_params(self, client):
        session_id = open_session(client, "<p>Hello</p>")["id"]

        response = client.post(
            f"/api/sessions/{session_id}/commands",
            json={"name": "setHeading", "params": {"level": 7}},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error_type"] == "InvalidArgument"
        assert client.get(f"/api/sessions/{session_id}").json()["html"] == "<p>Hello</p>"

    def test_unknown_command(self, client):
        session_id = open_session(client)["id"]

        response = client.post(f"/api/sessions/{session_id}/commands", json={"name": "sparkle"})

        assert response.status_code == 400
        assert response.json()["detail"]["error_type"] == "UnknownCommand"

    def test_active_query(self, client):
        session_id = open_session(client, "<h2>Title</h2>")["id"]

        response = client.post(
            f"/api/sessions/{session_id}/active",
            json={"name": "heading", "attrs": {"level": 2}},
        )

        assert response.json()["active"] is True


class TestMediaUpload:
    """Tests for uploading media into a session."""

    def test_image_inserted(self, client, gateway):
        session_id = open_session(client, "<p>Hi</p>")["id"]
        select(client, session_id, ([0], 2))

        response = client.post(
            f"/api/sessions/{session_id}/media",
            files={"file": ("cat.png", b"\x89PNG", "image/png")},
            data={"kind": "image"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["url"] == "https://cdn.example.com/cat.png"
        assert '<img src="https://cdn.example.com/cat.png">' in data["html"]
        assert gateway.uploads[0][0] == "cat.png"

    def test_rejected_upload(self, store):
        app = create_app(EditorConfig(), store=store, gateway=RecordingGateway(reject=True))
        client = TestClient(app)
        session_id = open_session(client, "<p>Hi</p>")["id"]

        response = client.post(
            f"/api/sessions/{session_id}/media",
            files={"file": ("big.png", b"x", "image/png")},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["message"] == "Image size should be less than 5MB"
        assert client.get(f"/api/sessions/{session_id}").json()["html"] == "<p>Hi</p>"


class TestArticles:
    """Tests for saving, reopening and previewing articles."""

    def test_save_and_reopen(self, client):
        session_id = open_session(client, "<p>Draft body</p>")["id"]

        saved = client.post(
            f"/api/sessions/{session_id}/article",
            json={"title": "News", "category": "africa"},
        ).json()

        assert saved["content"] == "<p>Draft body</p>"
        assert saved["excerpt"] == "Draft body"

        reopened = client.post(f"/api/articles/{saved['id']}/session")
        assert reopened.status_code == 201
        assert reopened.json()["article_id"] == saved["id"]
        assert reopened.json()["html"] == "<p>Draft body</p>"

    def test_save_updates_existing(self, client, store):
        """Saving with an article id replaces content and keeps the record."""
        first = open_session(client, "<p>one</p>")["id"]
        article_id = client.post(
            f"/api/sessions/{first}/article",
            json={"title": "News", "category": "business"},
        ).json()["id"]
        second = open_session(client, "<p>two</p>")["id"]

        client.post(
            f"/api/sessions/{second}/article",
            json={"title": "News", "category": "business", "article_id": article_id, "status": "published"},
        )

        article = store.get(article_id)
        assert article.content == "<p>two</p>"
        assert article.status.value == "published"
        assert len(store.list_articles()) == 1

    def test_invalid_category(self, client):
        session_id = open_session(client)["id"]

        response = client.post(f"/api/sessions/{session_id}/article", json={"title": "x", "category": "sport"})

        assert response.status_code == 422

    def test_missing_article(self, client):
        assert client.post("/api/articles/missing/session").status_code == 404
        assert client.get("/api/articles/missing/preview").status_code == 404

    def test_preview(self, client):
        session_id = open_session(client, "<p>Body</p>")["id"]
        article_id = client.post(
            f"/api/sessions/{session_id}/article",
            json={"title": "Preview me", "category": "security"},
        ).json()["id"]

        response = client.get(f"/api/articles/{article_id}/preview")

        assert response.status_code == 200
        assert "<h1>Preview me</h1>" in response.text
        assert "<p>Body</p>" in response.text
