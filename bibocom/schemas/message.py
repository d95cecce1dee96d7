"""
Messaging schemas.

Mirrors the payloads of the ``/messages`` endpoints. Conversations are keyed
by ``partner_id``; messages are kept in the order the server returned them.
"""

from __future__ import annotations

import itertools
from datetime import datetime, timezone
from enum import StrEnum
from typing import Optional

from pydantic import Field

from bibocom.schemas.base import ApiModel
from bibocom.schemas.user import Partner

_local_ids = itertools.count(-1, -1)


class MediaType(StrEnum):
    """Media kinds a message can carry."""

    IMAGE = "image"
    VIDEO = "video"

    @classmethod
    def from_content_type(cls, content_type: str) -> MediaType:
        return cls.IMAGE if content_type.startswith("image/") else cls.VIDEO


class Message(ApiModel):
    """A direct message between two users."""

    id: int
    sender_id: int
    receiver_id: int
    content: str = ""
    media_url: Optional[str] = None
    media_type: Optional[MediaType] = None
    is_read: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Client-only flags, never sent back to the server
    is_deleting: bool = Field(default=False, exclude=True)
    is_local: bool = Field(default=False, exclude=True)

    def involves(self, user_id: int) -> bool:
        return user_id in (self.sender_id, self.receiver_id)


class Conversation(ApiModel):
    """Summary row of the conversation list."""

    partner_id: int
    partner_name: str = ""
    partner_photo: Optional[str] = None
    partner_role: str = ""
    last_message: Optional[str] = None
    last_media_url: Optional[str] = None
    last_media_type: Optional[str] = None
    last_message_time: Optional[datetime] = None
    unread_count: int = 0

    def matches(self, query: str) -> bool:
        """Case-insensitive match on partner name or last message."""
        needle = query.strip().lower()
        if not needle:
            return True
        if needle in self.partner_name.lower():
            return True
        return bool(self.last_message and needle in self.last_message.lower())


class MessageThread(ApiModel):
    """Payload of ``GET /messages/with/:partnerId``."""

    partner: Optional[Partner] = None
    messages: list[Message] = Field(default_factory=list)


class SendResult(ApiModel):
    """Payload of send/update calls. ``data`` is absent on unexpected shapes."""

    success: bool = False
    message: Optional[str] = None
    data: Optional[Message] = None


def local_message_id() -> int:
    """Temporary id for messages synthesised client side (negative, never a server id)."""
    return next(_local_ids)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
