"""Abstract interfaces for the BTAML editor's external collaborators."""

from .media import IMediaUploadGateway
from .store import Article, IArticleStore

__all__ = [
    "IMediaUploadGateway",
    "IArticleStore",
    "Article",
]
