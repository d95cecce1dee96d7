"""Client for the ``/messages`` endpoints."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from bibocom.adapters.base import ApiClient
from bibocom.constants.messages import Messages
from bibocom.core.errors import ClientValidationError, MarketplaceError, ServerError
from bibocom.infra.logging_config import get_logger
from bibocom.schemas.media import MediaAttachment
from bibocom.schemas.message import Conversation, Message, MessageThread, SendResult

logger = get_logger("message_client")


def conversation_key(user_id_1: int, user_id_2: int) -> str:
    """Order-independent key for the conversation between two users."""
    return "_".join(str(i) for i in sorted((user_id_1, user_id_2)))


class MessageClient(ApiClient):
    """Request/response wrappers for direct messages. No cache, no retry."""

    conversation_key = staticmethod(conversation_key)

    def list_conversations(self) -> list[Conversation]:
        body = self._request(
            "GET",
            "/messages/conversations",
            fallback_message=Messages.LOAD_CONVERSATIONS_FAILED,
        )
        try:
            conversations = [
                Conversation.model_validate(c) for c in _data(body, default=[])
            ]
        except ValidationError as e:
            raise ServerError(200, Messages.LOAD_CONVERSATIONS_FAILED, body) from e
        logger.info("Fetched %d conversations", len(conversations))
        return conversations

    def list_messages(self, partner_id: int) -> MessageThread:
        body = self._request(
            "GET",
            f"/messages/with/{partner_id}",
            fallback_message=Messages.LOAD_MESSAGES_FAILED,
        )
        data = _data(body, default={})
        if not isinstance(data, dict):
            raise ServerError(200, Messages.LOAD_MESSAGES_FAILED, body)
        try:
            thread = MessageThread.model_validate(data)
        except ValidationError as e:
            raise ServerError(200, Messages.LOAD_MESSAGES_FAILED, body) from e
        logger.info(
            "Fetched %d messages with partner=%s", len(thread.messages), partner_id
        )
        return thread

    def send(
        self,
        partner_id: int,
        content: str,
        media: Optional[MediaAttachment] = None,
    ) -> SendResult:
        """
        Send a message as multipart form data (``receiverId``, ``content``,
        optional ``media``).

        The returned result has ``data=None`` when the server answered 2xx
        with an unexpected body; callers decide how to render that.
        """
        form = {"receiverId": str(partner_id), "content": content}
        files = None
        if media is not None:
            try:
                payload = media.file.read()
            except (OSError, ValueError) as e:
                logger.warning("Could not read %s: %s", media.file.filename, e)
                raise ClientValidationError(Messages.MEDIA_UNREADABLE) from e
            files = {
                "media": (media.file.filename, payload, media.file.content_type)
            }
        body = self._request(
            "POST",
            "/messages/send",
            data=form,
            files=files,
            fallback_message=Messages.SEND_FAILED,
        )
        return _send_result(body)

    def mark_read(self, message_id: int) -> None:
        self._request("PATCH", f"/messages/{message_id}/read")

    def mark_all_read(self, partner_id: int) -> int:
        """Mark every message from partner as read; returns the count."""
        body = self._request("PATCH", f"/messages/read/all/{partner_id}")
        count = body.get("count", 0) if isinstance(body, dict) else 0
        logger.info("Marked %s message(s) from partner=%s as read", count, partner_id)
        return int(count or 0)

    def update(self, message_id: int, content: str) -> SendResult:
        if not content.strip():
            raise ClientValidationError(Messages.EMPTY_MESSAGE)
        body = self._request(
            "PUT",
            f"/messages/{message_id}",
            json={"content": content},
            fallback_message=Messages.EDIT_FAILED,
        )
        return _send_result(body)

    def delete(self, message_id: int, for_everyone: bool = False) -> bool:
        """
        Delete a message. Returns the server's ``success`` flag when present.

        Any 2xx counts as done, even with a malformed body.
        """
        params = {"forEveryone": "true"} if for_everyone else None
        body = self._request(
            "DELETE",
            f"/messages/{message_id}",
            params=params,
            fallback_message=Messages.DELETE_FAILED,
        )
        return bool(body.get("success", True)) if isinstance(body, dict) else True

    def unread_count(self) -> int:
        body = self._request("GET", "/messages/unread/count")
        if not isinstance(body, dict):
            return 0
        return int(body.get("unreadCount") or 0)

    def search(self, query: str) -> list[Message]:
        body = self._request("GET", "/messages/search", params={"query": query})
        try:
            return [Message.model_validate(m) for m in _data(body, default=[])]
        except ValidationError as e:
            raise ServerError(200, Messages.GENERIC_ERROR, body) from e

    def has_existing_conversation(self, partner_id: int) -> bool:
        """True if a conversation with partner exists. Errors count as False."""
        try:
            conversations = self.list_conversations()
        except MarketplaceError as e:
            logger.warning("Could not check conversations with %s: %s", partner_id, e)
            return False
        return any(c.partner_id == partner_id for c in conversations)


def _data(body: Any, default: Any) -> Any:
    if isinstance(body, dict) and "data" in body:
        return body["data"] if body["data"] is not None else default
    return default


def _send_result(body: Any) -> SendResult:
    if not isinstance(body, dict):
        return SendResult()
    try:
        return SendResult.model_validate(body)
    except ValidationError as e:
        logger.warning("Unexpected message payload: %s", e)
        return SendResult(success=bool(body.get("success")), message=body.get("message"))
