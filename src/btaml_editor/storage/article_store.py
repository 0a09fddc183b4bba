"""SQLAlchemy-backed article store."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, select

from ..interfaces.store import Article, IArticleStore
from ..models.enums import ArticleCategory, ArticleStatus
from ..models.exceptions import NotFound
from ..serialization.html_deserializer import HtmlDeserializer
from ..serialization.text import DEFAULT_EXCERPT_LENGTH, generate_excerpt
from .database import DatabaseManager
from .models import ArticleModel

logger = logging.getLogger(__name__)


class SqlArticleStore(IArticleStore):
    """
    Article store implementation backed by a relational database.

    Content is stored exactly as given. When an article has no excerpt,
    one is generated from its content.
    """

    def __init__(self, db_manager: DatabaseManager, excerpt_length: int = DEFAULT_EXCERPT_LENGTH):
        """
        Initialize the article store.

        Args:
            db_manager: Database manager for connections.
            excerpt_length: Characters kept in generated excerpts.
        """
        self._db_manager = db_manager
        self._excerpt_length = excerpt_length
        self._deserializer = HtmlDeserializer()

    def _from_model(self, model: ArticleModel) -> Article:
        """Convert SQLAlchemy model to Article dataclass."""
        return Article(
            id=model.id,
            title=model.title,
            content=model.content,
            category=ArticleCategory(model.category),
            country=model.country,
            thumbnail=model.thumbnail,
            excerpt=model.excerpt,
            status=ArticleStatus(model.status),
            author=model.author,
            views=model.views or 0,
            created_at=model.created_at,
            updated_at=model.updated_at,
            metadata=model.metadata_ or {},
        )

    def _apply(self, model: ArticleModel, article: Article) -> None:
        model.title = article.title
        model.content = article.content
        model.category = article.category.value
        model.country = article.country
        model.thumbnail = article.thumbnail
        model.excerpt = article.excerpt or self.excerpt_for(article.content)
        model.status = article.status.value
        model.author = article.author
        model.views = article.views
        model.metadata_ = article.metadata

    def excerpt_for(self, content: str) -> str:
        return generate_excerpt(self._deserializer.deserialize(content), self._excerpt_length)

    def save(self, article: Article) -> Article:
        """
        Insert or update an article.

        Args:
            article: Article to store. An id that does not exist yet is
                kept for the new record.

        Returns:
            The stored article.
        """
        with self._db_manager.get_session() as session:
            model = session.get(ArticleModel, article.id) if article.id else None
            if model is None:
                model = ArticleModel(id=article.id) if article.id else ArticleModel()
                session.add(model)
                action = "Created"
            else:
                model.updated_at = datetime.now(timezone.utc)
                action = "Updated"
            self._apply(model, article)
            session.flush()
            stored = self._from_model(model)
        logger.info(f"{action} article {stored.id} ({stored.status.value})")
        return stored

    def get(self, article_id: str) -> Article:
        """
        Load an article by id.

        Raises:
            NotFound: If no article has `article_id`.
        """
        with self._db_manager.get_session() as session:
            model = session.get(ArticleModel, article_id)
            if model is None:
                raise NotFound(f"Article not found: {article_id}", details={"article_id": article_id})
            return self._from_model(model)

    def list_articles(
        self,
        category: Optional[ArticleCategory] = None,
        status: Optional[ArticleStatus] = None,
    ) -> List[Article]:
        """
        List articles with optional filters.

        Args:
            category: Filter by category.
            status: Filter by publication status.

        Returns:
            Matching articles, newest first.
        """
        with self._db_manager.get_session() as session:
            query = select(ArticleModel)

            conditions = []
            if category:
                conditions.append(ArticleModel.category == ArticleCategory(category).value)
            if status:
                conditions.append(ArticleModel.status == ArticleStatus(status).value)
            if conditions:
                query = query.where(and_(*conditions))

            query = query.order_by(ArticleModel.created_at.desc())
            models = session.execute(query).scalars().all()
            return [self._from_model(m) for m in models]

    def delete(self, article_id: str) -> bool:
        with self._db_manager.get_session() as session:
            model = session.get(ArticleModel, article_id)
            if model is None:
                return False
            session.delete(model)
        logger.info(f"Deleted article {article_id}")
        return True

    def health_check(self) -> bool:
        return self._db_manager.health_check()
