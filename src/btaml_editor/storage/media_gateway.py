"""Local filesystem media upload gateway."""

import asyncio
import logging
import secrets
import string
import time
from pathlib import Path
from typing import Optional, Union

from ..config.models import EditorConfig
from ..interfaces.media import IMediaUploadGateway
from ..models.enums import MediaKind
from ..models.exceptions import UploadError

logger = logging.getLogger(__name__)

_KEY_ALPHABET = string.ascii_lowercase + string.digits

ALLOWED_EXTENSIONS = {
    MediaKind.IMAGE: frozenset({"png", "jpg", "jpeg", "gif", "webp"}),
    MediaKind.VIDEO: frozenset({"mp4", "webm", "ogg"}),
}


class LocalMediaUploadGateway(IMediaUploadGateway):
    """
    Stores uploads under a local directory served at a public base URL.

    Objects are named ``<prefix>/<millis>-<random>.<ext>``. The declared
    content type must match the requested media kind and the file must fit
    the size limit for that kind.
    """

    def __init__(
        self,
        media_root: Union[str, Path],
        base_url: str,
        prefix: str = "articles",
        max_image_bytes: int = 5 * 1024 * 1024,
        max_video_bytes: int = 50 * 1024 * 1024,
    ):
        self._media_root = Path(media_root)
        self._base_url = base_url.rstrip("/")
        self._prefix = prefix.strip("/")
        self._limits = {MediaKind.IMAGE: max_image_bytes, MediaKind.VIDEO: max_video_bytes}

    @classmethod
    def from_config(cls, config: EditorConfig) -> "LocalMediaUploadGateway":
        return cls(
            media_root=config.media_root,
            base_url=config.media_base_url,
            prefix=config.media_prefix,
            max_image_bytes=config.max_image_bytes,
            max_video_bytes=config.max_video_bytes,
        )

    @property
    def media_root(self) -> Path:
        return self._media_root

    async def upload(self, data: bytes, filename: str, content_type: str, kind: MediaKind) -> str:
        """
        Validate and store a file.

        Returns:
            Public URL of the stored file.

        Raises:
            UploadError: If the type or size is rejected, or writing fails.
        """
        kind = MediaKind(kind)
        self.validate(data, content_type, kind, filename or "")
        key = self.object_key(filename)
        path = self._media_root / key
        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as e:
            logger.error(f"Failed to store upload {key}: {e}")
            raise UploadError(
                f"Failed to store {filename}: {e}",
                location=key,
                details={"user_message": "Failed to upload media"},
            )
        logger.info(f"Stored {kind.value} upload {key} ({len(data)} bytes)")
        return f"{self._base_url}/{key}"

    def validate(self, data: bytes, content_type: str, kind: MediaKind, filename: Optional[str] = None) -> None:
        """
        Reject empty files, mismatched content types, oversized files and,
        when `filename` is given, extensions outside the allowlist for `kind`.
        """
        if not data:
            raise UploadError("Uploaded file is empty", details={"user_message": "The selected file is empty"})
        if not (content_type or "").lower().startswith(f"{kind.value}/"):
            raise UploadError(
                f"Content type {content_type!r} is not an {kind.value} type",
                details={"user_message": f"Please select an {kind.value} file"},
            )
        limit = self._limits[kind]
        if len(data) > limit:
            raise UploadError(
                f"{kind.value.capitalize()} of {len(data)} bytes exceeds the {limit} byte limit",
                details={
                    "user_message": f"{kind.value.capitalize()} size should be less than {limit // (1024 * 1024)}MB",
                    "limit": limit,
                },
            )
        if filename is not None:
            extension = _extension(filename)
            allowed = ALLOWED_EXTENSIONS[kind]
            if extension not in allowed:
                raise UploadError(
                    f"Extension {extension!r} is not allowed for {kind.value} uploads",
                    details={"user_message": "Invalid file type", "allowed": sorted(allowed)},
                )

    def object_key(self, filename: str, now: Optional[float] = None) -> str:
        """Unique storage key keeping the original file extension."""
        millis = int((time.time() if now is None else now) * 1000)
        token = "".join(secrets.choice(_KEY_ALPHABET) for _ in range(9))
        suffix = _extension(filename)
        name = f"{millis}-{token}.{suffix}" if suffix else f"{millis}-{token}"
        return f"{self._prefix}/{name}" if self._prefix else name

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)


def _extension(filename: Optional[str]) -> str:
    return Path(filename or "").suffix.lower().lstrip(".")
