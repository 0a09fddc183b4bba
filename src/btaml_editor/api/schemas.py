"""Request payloads for the HTTP API."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..models.enums import ArticleCategory, ArticleStatus


class SessionCreate(BaseModel):
    """Session creation payload."""

    html: Optional[str] = None


class PositionPayload(BaseModel):
    path: list[int]
    offset: int = 0


class SelectionUpdate(BaseModel):
    """Selection payload. A missing head gives a collapsed cursor."""

    anchor: PositionPayload
    head: Optional[PositionPayload] = None


class CommandRequest(BaseModel):
    """Command dispatch payload, e.g. ``{"name": "setHeading", "params": {"level": 2}}``."""

    name: str
    params: Dict[str, Any] = Field(default_factory=dict)


class ActiveQuery(BaseModel):
    """Active-state query payload."""

    name: Optional[str] = None
    attrs: Optional[Dict[str, Any]] = None


class ArticleSave(BaseModel):
    """Metadata saved alongside the session's document."""

    title: str
    category: ArticleCategory
    article_id: Optional[str] = None
    country: Optional[str] = None
    thumbnail: Optional[str] = None
    excerpt: Optional[str] = None
    status: ArticleStatus = ArticleStatus.DRAFT
    author: Optional[str] = None
