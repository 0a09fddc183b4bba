"""FastAPI application for the BTAML editor.

This module exposes editing sessions, media uploads and article
persistence over HTTP. Each session is an explicit server-side editor;
clients dispatch commands by name and read back the document and the
toolbar state.

Usage (from project root, after installing the package):

    uvicorn btaml_editor.api.app:app --reload

Then POST to /api/sessions to open a session.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse

from ..config.config_manager import load_config
from ..config.models import EditorConfig
from ..interfaces.media import IMediaUploadGateway
from ..interfaces.store import Article, IArticleStore
from ..models.enums import MediaKind
from ..models.exceptions import EditorError, InvalidArgument, NotFound, SchemaViolation, UploadError
from ..rendering.preview_renderer import PreviewRenderer
from ..serialization.report import ParseReport
from ..session.editor_session import EditorSession
from ..session.manager import EditorSessionManager
from ..session.toolbar import ToolbarController
from ..storage.article_store import SqlArticleStore
from ..storage.database import DatabaseManager
from ..storage.media_gateway import LocalMediaUploadGateway
from .schemas import ActiveQuery, ArticleSave, CommandRequest, SelectionUpdate, SessionCreate

logger = logging.getLogger(__name__)


def _http_error(exc: EditorError) -> HTTPException:
    """Map an editor error onto the matching HTTP status."""
    if isinstance(exc, NotFound):
        status = 404
    elif isinstance(exc, UploadError):
        return HTTPException(status_code=422, detail={"error": exc.to_dict(), "message": exc.user_message()})
    elif isinstance(exc, (InvalidArgument, SchemaViolation)):
        status = 400
    else:
        status = 500
    return HTTPException(status_code=status, detail=exc.to_dict())


def _session_payload(session: EditorSession) -> dict:
    payload = session.to_dict()
    payload["html"] = session.html()
    payload["toolbar"] = ToolbarController(session).state()
    return payload


def create_app(
    config: Optional[EditorConfig] = None,
    store: Optional[IArticleStore] = None,
    gateway: Optional[IMediaUploadGateway] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        config: Editor configuration. Loaded from BTAML_* environment
            variables when omitted.
        store: Article store. Defaults to a SqlArticleStore on
            `config.database_url`.
        gateway: Media upload gateway. Defaults to local file storage.
    """
    config = config or load_config()
    if store is None:
        store = SqlArticleStore(DatabaseManager.from_config(config), config.excerpt_length)
    gateway = gateway or LocalMediaUploadGateway.from_config(config)
    sessions = EditorSessionManager(config)
    renderer = PreviewRenderer(unknown_tag_policy=config.unknown_tag_policy)

    app = FastAPI(title="BTAML Editor API", version="0.1.0")
    app.state.config = config
    app.state.store = store
    app.state.gateway = gateway
    app.state.sessions = sessions

    def _get_session(session_id: str) -> EditorSession:
        try:
            return sessions.get(session_id)
        except NotFound as exc:
            raise _http_error(exc) from exc

    @app.get("/api/health")
    async def health() -> JSONResponse:
        healthy = store.health_check()
        return JSONResponse(
            status_code=200 if healthy else 503,
            content={"status": "ok" if healthy else "unavailable", "sessions": len(sessions)},
        )

    @app.post("/api/sessions")
    async def create_session(payload: Optional[SessionCreate] = None) -> JSONResponse:
        """Open an editing session, optionally loaded with HTML content."""
        report = ParseReport(source="request")
        session = sessions.create(html=payload.html if payload else None, report=report)
        content = _session_payload(session)
        content["parse_report"] = report.get_summary()
        return JSONResponse(status_code=201, content=content)

    @app.get("/api/sessions/{session_id}")
    async def get_session(session_id: str) -> JSONResponse:
        return JSONResponse(status_code=200, content=_session_payload(_get_session(session_id)))

    @app.put("/api/sessions/{session_id}/selection")
    async def set_selection(session_id: str, payload: SelectionUpdate) -> JSONResponse:
        """Move the selection. Stale positions fall back to the document start."""
        session = _get_session(session_id)
        try:
            session.set_selection(payload.model_dump(exclude_none=True))
        except EditorError as exc:
            raise _http_error(exc) from exc
        return JSONResponse(status_code=200, content=_session_payload(session))

    @app.post("/api/sessions/{session_id}/commands")
    async def dispatch_command(session_id: str, payload: CommandRequest) -> JSONResponse:
        """Dispatch a command by name.

        Inapplicable commands succeed with ``applied: false``; rejected
        parameters return 400 and leave the session unchanged.
        """
        session = _get_session(session_id)
        try:
            applied = session.dispatch(payload.name, payload.params)
        except EditorError as exc:
            raise _http_error(exc) from exc
        content = _session_payload(session)
        content["applied"] = applied
        return JSONResponse(status_code=200, content=content)

    @app.post("/api/sessions/{session_id}/active")
    async def query_active(session_id: str, payload: ActiveQuery) -> JSONResponse:
        session = _get_session(session_id)
        return JSONResponse(
            status_code=200,
            content={"name": payload.name, "attrs": payload.attrs, "active": session.is_active(payload.name, payload.attrs)},
        )

    @app.post("/api/sessions/{session_id}/media")
    async def upload_media(
        session_id: str,
        file: UploadFile = File(..., description="Image or video file"),
        kind: MediaKind = Form(MediaKind.IMAGE),
    ) -> JSONResponse:
        """Upload a file and insert it at the session's cursor."""
        session = _get_session(session_id)
        data = await file.read()
        try:
            url = await session.insert_uploaded_media(
                gateway,
                data,
                file.filename or "",
                file.content_type or "",
                kind,
            )
        except EditorError as exc:
            raise _http_error(exc) from exc
        content = _session_payload(session)
        content["url"] = url
        return JSONResponse(status_code=200, content=content)

    @app.delete("/api/sessions/{session_id}")
    async def close_session(session_id: str) -> JSONResponse:
        if not sessions.close(session_id):
            raise HTTPException(status_code=404, detail=f"Editor session not found: {session_id}")
        return JSONResponse(status_code=200, content={"id": session_id, "closed": True})

    @app.post("/api/sessions/{session_id}/article")
    async def save_article(session_id: str, payload: ArticleSave) -> JSONResponse:
        """Save the session's document as an article's content.

        An existing article keeps its views and creation time; only the
        content and the given metadata change.
        """
        session = _get_session(session_id)
        fields = payload.model_dump(exclude={"article_id"})
        fields["content"] = session.html()
        try:
            if payload.article_id:
                try:
                    article = dataclasses.replace(store.get(payload.article_id), **fields)
                except NotFound:
                    article = Article(id=payload.article_id, **fields)
            else:
                article = Article(**fields)
            stored = store.save(article)
        except EditorError as exc:
            raise _http_error(exc) from exc
        return JSONResponse(status_code=200, content=stored.to_dict())

    @app.post("/api/articles/{article_id}/session")
    async def open_article(article_id: str) -> JSONResponse:
        """Open a session loaded with a stored article's content."""
        try:
            article = store.get(article_id)
        except EditorError as exc:
            raise _http_error(exc) from exc
        report = ParseReport(source=f"article:{article_id}")
        session = sessions.create(html=article.content, report=report)
        content = _session_payload(session)
        content["article_id"] = article_id
        content["parse_report"] = report.get_summary()
        return JSONResponse(status_code=201, content=content)

    @app.get("/api/articles/{article_id}/preview", response_class=HTMLResponse)
    async def preview_article(article_id: str) -> HTMLResponse:
        try:
            article = store.get(article_id)
        except EditorError as exc:
            raise _http_error(exc) from exc
        return HTMLResponse(content=renderer.render_article(article))

    return app


app = create_app()
