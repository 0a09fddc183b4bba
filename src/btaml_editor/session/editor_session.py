"""
Editing sessions.

An EditorSession owns one document, its selection and its undo history.
Every command runs against the current state and either replaces it as
one transaction or leaves it untouched.
"""

import logging
import uuid
from typing import Any, Dict, Optional, Union

from ..commands.queries import Query, heading_level, is_active
from ..commands.registry import CommandName, CommandRegistry, create_default_registry
from ..commands.state import EditorState
from ..config.models import EditorConfig
from ..interfaces.media import IMediaUploadGateway
from ..models.document import Document
from ..models.enums import MediaKind
from ..models.exceptions import EditorError, NotFound, UnknownCommand, UploadError
from ..models.selection import Selection
from ..models.tree import resolve_selection, start_of
from ..serialization.html_deserializer import HtmlDeserializer
from ..serialization.html_serializer import HtmlSerializer
from ..serialization.json_serializer import selection_from_dict, state_to_dict
from ..serialization.report import ParseReport
from .history import History

logger = logging.getLogger(__name__)

_YOUTUBE_COMMANDS = frozenset({CommandName.INSERT_YOUTUBE, CommandName.SET_YOUTUBE})


class EditorSession:
    """
    A single editor instance with an explicit lifecycle.

    Sessions are created by an EditorSessionManager (or directly in tests)
    and closed when editing ends; closing clears the history.
    """

    def __init__(
        self,
        doc: Optional[Document] = None,
        config: Optional[EditorConfig] = None,
        registry: Optional[CommandRegistry] = None,
        session_id: Optional[str] = None,
    ):
        """
        Initialize an editing session.

        Args:
            doc: Initial document. Defaults to an empty document.
            config: Editor configuration. Defaults are used when omitted.
            registry: Command registry. Defaults to the full catalog.
            session_id: Identifier. A UUID is generated when omitted.
        """
        self.id = session_id or str(uuid.uuid4())
        self.config = config or EditorConfig()
        self._registry = registry or create_default_registry()
        self._state = EditorState.create(doc)
        self.history = History(self.config.history_depth)
        self._serializer = HtmlSerializer()
        self._deserializer = HtmlDeserializer(self.config.unknown_tag_policy)
        self._closed = False

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def doc(self) -> Document:
        return self._state.doc

    @property
    def selection(self) -> Selection:
        return self._state.selection

    @property
    def closed(self) -> bool:
        return self._closed

    def dispatch(self, name: Union[CommandName, str], params: Optional[Dict[str, Any]] = None) -> bool:
        """
        Run a command against the current state.

        Args:
            name: Command enum member or wire name, e.g. ``"toggleBold"``.
            params: Keyword parameters for the command.

        Returns:
            True if the state changed, False for an inapplicable command.

        Raises:
            UnknownCommand: If `name` is not a command.
            InvalidArgument: If a parameter is outside its domain.
            SchemaViolation: If the command would break the schema.
        """
        self._ensure_open()
        command = _command_name(name)
        if command == CommandName.UNDO:
            return self.undo()
        if command == CommandName.REDO:
            return self.redo()

        params = dict(params or {})
        if command in _YOUTUBE_COMMANDS:
            if params.get("width") is None:
                params["width"] = self.config.youtube_width
            if params.get("height") is None:
                params["height"] = self.config.youtube_height

        previous = self._state
        try:
            new_state = self._registry.apply(previous, command, params)
        except EditorError as e:
            logger.error(f"Session {self.id}: {command.value} rejected: {e}")
            raise

        if new_state is None or new_state == previous:
            logger.debug(f"Session {self.id}: {command.value} did not apply")
            return False
        self.history.record(previous)
        self._state = new_state
        return True

    def undo(self) -> bool:
        self._ensure_open()
        state = self.history.undo(self._state)
        if state is None:
            return False
        self._state = state
        return True

    def redo(self) -> bool:
        self._ensure_open()
        state = self.history.redo(self._state)
        if state is None:
            return False
        self._state = state
        return True

    def is_active(self, name: Query = None, attrs: Optional[Dict[str, Any]] = None) -> bool:
        return is_active(self._state, name, attrs)

    def heading_level(self) -> int:
        return heading_level(self._state)

    def set_selection(self, selection: Union[Selection, Dict[str, Any]]) -> Selection:
        """
        Move the selection.

        A selection that no longer resolves against the document is replaced
        by a cursor at the start of the document.

        Returns:
            The selection now in effect.

        Raises:
            InvalidArgument: If a dict selection is malformed.
        """
        self._ensure_open()
        if isinstance(selection, dict):
            selection = selection_from_dict(selection)
        try:
            resolve_selection(self.doc, selection)
        except NotFound as e:
            logger.warning(f"Session {self.id}: stale selection ({e}), moving to document start")
            start = start_of(self.doc)
            selection = Selection(start, start)
        self._state = self._state.with_selection(selection)
        return selection

    def html(self) -> str:
        return self._serializer.serialize(self.doc)

    def load_html(self, html: Optional[str], report: Optional[ParseReport] = None) -> ParseReport:
        """
        Replace the document with parsed HTML and reset the history.

        Returns:
            Report of tags that were dropped or unwrapped while parsing.
        """
        self._ensure_open()
        report = report if report is not None else ParseReport()
        doc = self._deserializer.deserialize(html, report)
        if report.has_issues():
            logger.warning(f"Session {self.id}: loaded HTML with issues: {report.get_summary()}")
        self._state = EditorState.create(doc)
        self.history.clear()
        return report

    async def insert_uploaded_media(
        self,
        gateway: IMediaUploadGateway,
        data: bytes,
        filename: str,
        content_type: str,
        kind: Union[MediaKind, str],
    ) -> str:
        """
        Upload a file, then insert the matching media node at the cursor.

        Nothing is inserted until the upload resolves. A failed upload
        leaves the document unchanged.

        Returns:
            The public URL of the uploaded file.

        Raises:
            UploadError: If the gateway rejects or fails the upload.
        """
        self._ensure_open()
        kind = MediaKind(kind)
        try:
            url = await gateway.upload(data, filename, content_type, kind)
        except UploadError as e:
            logger.error(f"Session {self.id}: upload of {filename} failed: {e}")
            raise
        command = CommandName.INSERT_IMAGE if kind == MediaKind.IMAGE else CommandName.INSERT_VIDEO
        self.dispatch(command, {"src": url})
        return url

    def to_dict(self) -> Dict[str, Any]:
        result = {"id": self.id}
        result.update(state_to_dict(self._state))
        result["can_undo"] = self.history.can_undo
        result["can_redo"] = self.history.can_redo
        return result

    def close(self) -> None:
        self.history.clear()
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise NotFound(f"Session {self.id} is closed", details={"session_id": self.id})


def _command_name(name: Union[CommandName, str]) -> CommandName:
    if isinstance(name, CommandName):
        return name
    try:
        return CommandName(name)
    except ValueError:
        raise UnknownCommand(f"Unknown command: {name!r}", details={"command": name})
