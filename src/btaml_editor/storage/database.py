"""Engine and session handling for the article store.

PostgreSQL in production; SQLite (file or in-memory) for tests and local
editing.
"""

import logging
import os
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config.models import EditorConfig
from .models import Base

logger = logging.getLogger(__name__)


def get_database_url() -> str:
    """PostgreSQL URL assembled from the POSTGRES_* environment variables."""
    host = os.environ.get("POSTGRES_HOST", "localhost")
    port = os.environ.get("POSTGRES_PORT", "5432")
    database = os.environ.get("POSTGRES_DB", "btaml_universe")
    user = os.environ.get("POSTGRES_USER", "postgres")
    password = os.environ.get("POSTGRES_PASSWORD", "postgres")
    return f"postgresql://{user}:{password}@{host}:{port}/{database}"


class DatabaseManager:
    """
    Owns the engine for one article database and hands out sessions.

    The engine is created lazily, so a manager can be built before the
    database is reachable.
    """

    def __init__(self, database_url: Optional[str] = None, pool_size: int = 5, max_overflow: int = 10):
        """
        Args:
            database_url: SQLAlchemy URL; None reads the POSTGRES_* variables.
            pool_size: Pooled connections for server databases.
            max_overflow: Connections allowed beyond `pool_size`.
        """
        self._database_url = database_url or get_database_url()
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def database_url(self) -> str:
        return self._database_url

    @classmethod
    def from_config(cls, config: EditorConfig, **kwargs) -> "DatabaseManager":
        """Manager for the database named by `config.database_url`."""
        return cls(database_url=config.database_url, **kwargs)

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            if self._database_url.startswith("sqlite"):
                kwargs = {"connect_args": {"check_same_thread": False}}
                # In-memory databases live in one shared connection.
                if ":memory:" in self._database_url or self._database_url in ("sqlite://", "sqlite+pysqlite://"):
                    kwargs["poolclass"] = StaticPool
                self._engine = create_engine(self._database_url, **kwargs)
            else:
                self._engine = create_engine(
                    self._database_url,
                    pool_size=self._pool_size,
                    max_overflow=self._max_overflow,
                    pool_pre_ping=True,
                )
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)
        return self._session_factory

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Session scoped to a `with` block.

        Commits when the block exits normally and rolls back on error.
        """
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self) -> None:
        """Create the article tables if they do not exist."""
        Base.metadata.create_all(self.engine)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None

    def health_check(self) -> bool:
        """Whether a trivial query succeeds."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database health check failed: {e}")
            return False
