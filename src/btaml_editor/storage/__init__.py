"""Persistence for articles and uploaded media."""

from .article_store import SqlArticleStore
from .database import DatabaseManager, get_database_url
from .media_gateway import LocalMediaUploadGateway
from .models import ArticleModel, Base

__all__ = [
    "SqlArticleStore",
    "DatabaseManager",
    "get_database_url",
    "LocalMediaUploadGateway",
    "ArticleModel",
    "Base",
]
