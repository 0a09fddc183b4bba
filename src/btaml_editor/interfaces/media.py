"""Media upload gateway interface for the BTAML editor."""

from abc import ABC, abstractmethod

from ..models.enums import MediaKind


class IMediaUploadGateway(ABC):
    """
    Abstract interface for media uploads.

    Implementations turn a binary file into a publicly resolvable URL. The
    editor inserts no node until the upload resolves.
    """

    @abstractmethod
    async def upload(self, data: bytes, filename: str, content_type: str, kind: MediaKind) -> str:
        """
        Store a media file.

        Args:
            data: File contents.
            filename: Original file name, used for the extension.
            content_type: Declared MIME type, such as ``image/png``.
            kind: Media kind the editor will insert.

        Returns:
            Public URL of the stored file.

        Raises:
            UploadError: If the file is rejected or cannot be stored.
        """
        pass
