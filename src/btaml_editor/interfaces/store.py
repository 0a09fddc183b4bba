"""Article store interface for the BTAML editor."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..models.enums import ArticleCategory, ArticleStatus


@dataclass
class Article:
    """
    Article record.

    `content` holds the serialized document; every other field is metadata
    the editor does not interpret.
    """
    title: str
    content: str
    category: ArticleCategory
    id: Optional[str] = None
    country: Optional[str] = None
    thumbnail: Optional[str] = None
    excerpt: Optional[str] = None
    status: ArticleStatus = ArticleStatus.DRAFT
    author: Optional[str] = None
    views: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.category = ArticleCategory(self.category)
        self.status = ArticleStatus(self.status)
        if self.metadata is None:
            self.metadata = {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "category": self.category.value,
            "country": self.country,
            "thumbnail": self.thumbnail,
            "excerpt": self.excerpt,
            "status": self.status.value,
            "author": self.author,
            "views": self.views,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "metadata": self.metadata,
        }


class IArticleStore(ABC):
    """
    Abstract interface for article persistence.

    The editor hands a serialized document to the store and receives one
    back; how it is stored is up to the implementation.
    """

    @abstractmethod
    def save(self, article: Article) -> Article:
        """
        Insert or update an article.

        Args:
            article: Article to store. A missing id inserts a new record.

        Returns:
            The stored article with id and timestamps filled in.
        """
        pass

    @abstractmethod
    def get(self, article_id: str) -> Article:
        """
        Load an article.

        Raises:
            NotFound: If no article has `article_id`.
        """
        pass

    @abstractmethod
    def list_articles(
        self,
        category: Optional[ArticleCategory] = None,
        status: Optional[ArticleStatus] = None,
    ) -> List[Article]:
        """List articles, newest first, optionally filtered."""
        pass

    @abstractmethod
    def delete(self, article_id: str) -> bool:
        """Delete an article. Returns False if it did not exist."""
        pass

    def health_check(self) -> bool:
        """Whether the backing storage is reachable."""
        return True
