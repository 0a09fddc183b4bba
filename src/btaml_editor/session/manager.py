"""Registry of open editing sessions."""

import logging
from typing import Dict, List, Optional

from ..commands.registry import CommandRegistry, create_default_registry
from ..config.models import EditorConfig
from ..models.exceptions import NotFound
from ..serialization.report import ParseReport
from .editor_session import EditorSession

logger = logging.getLogger(__name__)


class EditorSessionManager:
    """
    Creates, tracks and closes editing sessions.

    Sessions are independent: each owns its document and history, and all
    share one configuration and command registry.
    """

    def __init__(self, config: Optional[EditorConfig] = None, registry: Optional[CommandRegistry] = None):
        self.config = config or EditorConfig()
        self._registry = registry or create_default_registry()
        self._sessions: Dict[str, EditorSession] = {}

    def create(self, html: Optional[str] = None, report: Optional[ParseReport] = None) -> EditorSession:
        """
        Open a new session.

        Args:
            html: Initial content. An empty document is used when omitted.
            report: Receives parse issues for `html`.
        """
        session = EditorSession(config=self.config, registry=self._registry)
        if html is not None:
            session.load_html(html, report)
        self._sessions[session.id] = session
        logger.info(f"Created editor session {session.id}")
        return session

    def get(self, session_id: str) -> EditorSession:
        """
        Raises:
            NotFound: If no open session has `session_id`.
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFound(f"Editor session not found: {session_id}", details={"session_id": session_id})
        return session

    def close(self, session_id: str) -> bool:
        """Close and forget a session. Returns False if it was not open."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        logger.info(f"Closed editor session {session_id}")
        return True

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)

    def session_ids(self) -> List[str]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
