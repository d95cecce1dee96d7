"""Media files picked by the user and attachments staged for sending."""

from __future__ import annotations

import mimetypes
import os
from typing import Optional

from pydantic import BaseModel

from bibocom.schemas.message import MediaType


class MediaFile(BaseModel):
    """A file selected by the user, not yet validated."""

    filename: str
    content_type: str
    size: int
    content: Optional[bytes] = None
    path: Optional[str] = None

    @classmethod
    def from_path(cls, path: str, content_type: Optional[str] = None) -> MediaFile:
        """Describe a file on disk; the MIME type is guessed from its name."""
        guessed, _ = mimetypes.guess_type(path)
        return cls(
            filename=os.path.basename(path),
            content_type=content_type or guessed or "application/octet-stream",
            size=os.path.getsize(path),
            path=path,
        )

    def read(self) -> bytes:
        if self.content is not None:
            return self.content
        if self.path is None:
            raise ValueError(f"Media file {self.filename!r} has no content")
        with open(self.path, "rb") as fh:
            return fh.read()


class MediaPreview(BaseModel):
    """What the composer shows for a staged attachment."""

    filename: str
    media_type: MediaType
    size: int


class MediaAttachment(BaseModel):
    """A validated file waiting to be sent with the next message."""

    file: MediaFile
    media_type: MediaType
    preview_visible: bool = True

    @property
    def preview(self) -> Optional[MediaPreview]:
        if not self.preview_visible:
            return None
        return MediaPreview(
            filename=self.file.filename,
            media_type=self.media_type,
            size=self.file.size,
        )
