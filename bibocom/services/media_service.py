from __future__ import annotations

from typing import Optional

from bibocom.config import get_settings
from bibocom.constants.messages import Messages
from bibocom.core.errors import MediaValidationError
from bibocom.infra.logging_config import get_logger
from bibocom.schemas.media import MediaAttachment, MediaFile
from bibocom.schemas.message import MediaType

logger = get_logger("media")

ACCEPTED_PREFIXES = ("image/", "video/")


class MediaService:
    """Validates user-selected files and stages them as message attachments."""

    def __init__(self, max_bytes: Optional[int] = None) -> None:
        self.max_bytes = max_bytes or get_settings().media_max_bytes

    @property
    def max_megabytes(self) -> int:
        return self.max_bytes // (1024 * 1024)

    def validate(self, file: MediaFile) -> MediaType:
        """
        Check size and MIME type before anything is staged.

        Raises:
            MediaValidationError: file too large or not an image/video.
        """
        if file.size > self.max_bytes:
            raise MediaValidationError(
                MediaValidationError.TOO_LARGE,
                Messages.MEDIA_TOO_LARGE.format(max_mb=self.max_megabytes),
            )
        if not file.content_type.startswith(ACCEPTED_PREFIXES):
            raise MediaValidationError(
                MediaValidationError.UNSUPPORTED_TYPE,
                Messages.MEDIA_UNSUPPORTED_TYPE,
            )
        return MediaType.from_content_type(file.content_type)

    def stage(self, file: MediaFile) -> MediaAttachment:
        media_type = self.validate(file)
        logger.info(
            "Staged %s (%s, %d bytes)", file.filename, file.content_type, file.size
        )
        return MediaAttachment(file=file, media_type=media_type, preview_visible=True)
