"""SQLAlchemy models for the article store."""

from datetime import datetime, timezone
import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Index,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class JSONType(TypeDecorator):
    """Platform-independent JSON type.

    Uses JSONB for PostgreSQL and JSON for other databases (like SQLite).
    """
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(JSONB())
        else:
            return dialect.type_descriptor(JSON())


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class ArticleModel(Base):
    """Articles table model."""
    __tablename__ = "articles"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    category = Column(String(20), nullable=False)
    country = Column(String(100))
    thumbnail = Column(Text)
    excerpt = Column(Text)
    status = Column(String(20), nullable=False, default="draft")
    author = Column(String(255))
    views = Column(Integer, nullable=False, default=0)
    metadata_ = Column("metadata", JSONType)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint(
            "category IN ('africa', 'business', 'scholarship', 'security')",
            name="check_article_category",
        ),
        CheckConstraint("status IN ('draft', 'published')", name="check_article_status"),
        CheckConstraint("views >= 0", name="check_article_views"),
        Index("idx_articles_category", "category"),
        Index("idx_articles_status", "status"),
        Index("idx_articles_created_at", "created_at"),
    )
