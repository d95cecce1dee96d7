"""
ConversationController: view state of the messaging screen.

Holds the conversation list, the selected partner with its messages, the
editing/menu mode and the staged attachment. Every user action calls the
MessageClient and reconciles local state; errors are caught here and
surfaced through ``error``.

Each partner selection takes a new selection token. A response that comes
back for an older token (the user switched partner, or the controller was
closed) is dropped, so the displayed list always belongs to the selected
partner.
"""

from __future__ import annotations

from typing import Optional

from bibocom.adapters.message_client import MessageClient
from bibocom.adapters.user_client import UserClient
from bibocom.constants.events import EventTopic
from bibocom.constants.messages import Messages
from bibocom.core.errors import (
    AuthExpiredError,
    AuthRequiredError,
    ClientValidationError,
    ForbiddenError,
    MarketplaceError,
    MediaValidationError,
)
from bibocom.core.events import EventBus
from bibocom.core.scheduler import PollingScheduler
from bibocom.core.session import AuthContext
from bibocom.infra.logging_config import get_logger
from bibocom.schemas.media import MediaAttachment, MediaFile
from bibocom.schemas.message import (
    Conversation,
    Message,
    local_message_id,
    utc_now,
)
from bibocom.schemas.user import Partner
from bibocom.schemas.view_state import (
    IDLE,
    ConversationStatus,
    EditingMode,
    MenuOpenMode,
    MenuPosition,
    ViewMode,
)
from bibocom.services.media_service import MediaService
from bibocom.utils.aio import run_sync

logger = get_logger("conversations")

CONVERSATIONS_JOB = "conversations"
MESSAGES_JOB = "conversation-messages"
PENDING_UPLOAD_URL = "pending-upload"


class ConversationController:
    def __init__(
        self,
        auth: AuthContext,
        messages: MessageClient,
        users: Optional[UserClient] = None,
        bus: Optional[EventBus] = None,
        media: Optional[MediaService] = None,
    ) -> None:
        self._auth = auth
        self._messages = messages
        self._users = users
        self._bus = bus or EventBus()
        self._media = media or MediaService()

        self.status = ConversationStatus.IDLE
        self.conversations: list[Conversation] = []
        self.selected_partner_id: Optional[int] = None
        self.partner: Optional[Partner] = None
        self.messages: list[Message] = []
        self.view_mode: ViewMode = IDLE
        self.draft = ""
        self.attachment: Optional[MediaAttachment] = None
        self.search_query = ""
        self.error: Optional[str] = None

        self._selection = 0
        self._closed = False
        self._scheduler: Optional[PollingScheduler] = None
        self._unsubscribe = self._bus.subscribe(
            EventTopic.SESSION_ENDED, self._on_session_ended
        )

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def current_user_id(self) -> Optional[int]:
        return self._auth.user_id

    # Conversation list

    async def load_conversations(self) -> None:
        if not self._auth.is_authenticated:
            self.error = Messages.AUTH_REQUIRED
            return
        try:
            conversations = await run_sync(self._messages.list_conversations)
        except MarketplaceError as e:
            logger.warning("Loading conversations failed: %s", e)
            if not self._closed:
                self.error = e.message
            return
        if self._closed:
            return
        for conversation in conversations:
            if conversation.partner_id == self.selected_partner_id:
                conversation.unread_count = 0
        self.conversations = conversations
        await self._publish(EventTopic.CONVERSATIONS_CHANGED)

    def filtered_conversations(self) -> list[Conversation]:
        return [c for c in self.conversations if c.matches(self.search_query)]

    # Selection

    async def open_chat(self, partner_id: int) -> None:
        """
        Select a partner and load its thread.

        Messages and partner are replaced together from one fetch, never
        merged with the previous partner's. Mark-all-read is best effort.
        """
        if not self._auth.is_authenticated:
            self.error = Messages.AUTH_REQUIRED
            return
        token = self._select(partner_id)
        self.status = ConversationStatus.LOADING
        self._zero_unread(partner_id)

        try:
            thread = await run_sync(self._messages.list_messages, partner_id)
        except MarketplaceError as e:
            logger.error("Loading messages with partner=%s failed: %s", partner_id, e)
            if self._is_current(token):
                self.error = e.message
                self.status = ConversationStatus.READY
            return
        if not self._is_current(token):
            logger.debug("Dropping thread for partner=%s: selection changed", partner_id)
            return

        partner = thread.partner or await self._resolve_partner(partner_id)
        if not self._is_current(token):
            return

        self.partner = partner
        self.messages = self._own_thread(partner_id, thread.messages)
        self.status = ConversationStatus.READY
        await self._publish(EventTopic.MESSAGES_CHANGED, partner_id)

        try:
            count = await run_sync(self._messages.mark_all_read, partner_id)
        except MarketplaceError as e:
            logger.warning("Mark-all-read for partner=%s failed: %s", partner_id, e)
            return
        if count and self._is_current(token):
            for message in self.messages:
                if message.sender_id == partner_id:
                    message.is_read = True

    def close_chat(self) -> None:
        self._selection += 1
        self.selected_partner_id = None
        self.partner = None
        self.messages = []
        self.view_mode = IDLE
        self.draft = ""
        self.attachment = None
        self.status = ConversationStatus.IDLE

    async def refresh_messages(self) -> None:
        """Poll the open thread; replaces the list only when it changed."""
        partner_id = self.selected_partner_id
        if partner_id is None or self.status != ConversationStatus.READY:
            return
        token = self._selection
        try:
            thread = await run_sync(self._messages.list_messages, partner_id)
        except MarketplaceError as e:
            logger.warning("Polling messages with partner=%s failed: %s", partner_id, e)
            return
        if not self._is_current(token) or self.status != ConversationStatus.READY:
            return
        fresh = self._own_thread(partner_id, thread.messages)
        deleting = {m.id for m in self.messages if m.is_deleting}
        for message in fresh:
            message.is_deleting = message.id in deleting
        if [m.model_dump() for m in fresh] == [m.model_dump() for m in self.messages]:
            return
        self.messages = fresh
        if thread.partner is not None:
            self.partner = thread.partner
        await self._publish(EventTopic.MESSAGES_CHANGED, partner_id)

    # Composer

    async def send(self, text: Optional[str] = None) -> Optional[Message]:
        """
        Send the draft (or ``text``) with the staged attachment, if any.

        Empty text with nothing staged is a no-op, as is a second send while
        one is in flight. On failure nothing is appended and the draft is kept.
        """
        if self.status is ConversationStatus.SENDING:
            logger.debug("Send ignored: a send is already in flight")
            return None
        content = (self.draft if text is None else text).strip()
        attachment = self.attachment
        partner_id = self.selected_partner_id
        if not content and attachment is None:
            return None
        if partner_id is None:
            return None
        if not self._auth.is_authenticated:
            self.error = Messages.AUTH_REQUIRED
            return None

        token = self._selection
        self.status = ConversationStatus.SENDING
        self.error = None
        try:
            result = await run_sync(self._messages.send, partner_id, content, attachment)
        except MarketplaceError as e:
            logger.error("Sending to partner=%s failed: %s", partner_id, e)
            if self._is_current(token):
                self.error = e.message
                self.status = ConversationStatus.READY
            return None
        if self._closed:
            return None

        message = result.data
        if message is None:
            logger.warning("Send to partner=%s returned no message; using a local copy", partner_id)
            message = self._local_message(partner_id, content, attachment)
        self._patch_summary(partner_id, message, attachment)

        if not self._is_current(token):
            await self._publish(EventTopic.CONVERSATIONS_CHANGED)
            return message
        self.messages = [*self.messages, message]
        self.draft = ""
        self.attachment = None
        self.status = ConversationStatus.READY
        await self._publish(EventTopic.MESSAGES_CHANGED, partner_id)
        await self._publish(EventTopic.CONVERSATIONS_CHANGED)
        return message

    def select_media(self, file: MediaFile) -> Optional[MediaAttachment]:
        """Validate and stage a file. On rejection nothing is staged."""
        try:
            attachment = self._media.stage(file)
        except MediaValidationError as e:
            logger.info("Rejected %s: %s", file.filename, e.reason)
            self.error = e.message
            return None
        self.attachment = attachment
        self.error = None
        return attachment

    def remove_media(self) -> None:
        self.attachment = None

    # Context menu and editing

    def toggle_menu(self, message_id: int, position: Optional[MenuPosition] = None) -> None:
        if isinstance(self.view_mode, EditingMode):
            return
        if isinstance(self.view_mode, MenuOpenMode) and self.view_mode.message_id == message_id:
            self.view_mode = IDLE
            return
        self.view_mode = MenuOpenMode(message_id, position or MenuPosition())

    def handle_outside_click(self, in_menu: bool, on_trigger: bool) -> bool:
        """Close the menu when the click hit neither the menu nor its trigger."""
        if not isinstance(self.view_mode, MenuOpenMode):
            return False
        if in_menu or on_trigger:
            return False
        self.view_mode = IDLE
        return True

    def can_modify(self, message: Message) -> bool:
        """Own text messages only; media messages cannot be edited."""
        return (
            message.sender_id == self.current_user_id
            and bool(message.content.strip())
            and not message.media_url
        )

    def start_edit(self, message_id: int) -> bool:
        message = self._find(message_id)
        if message is None or not self.can_modify(message):
            return False
        self.view_mode = EditingMode(message_id, message.content)
        return True

    def update_edit(self, content: str) -> None:
        if isinstance(self.view_mode, EditingMode):
            self.view_mode = EditingMode(self.view_mode.message_id, content)

    def cancel_edit(self) -> None:
        if isinstance(self.view_mode, EditingMode):
            self.view_mode = IDLE

    async def save_edit(self) -> bool:
        """
        Save the message being edited.

        Auth failures (401/403) leave the message untouched. Any other
        server or network failure keeps the edit locally and says so.
        """
        mode = self.view_mode
        if not isinstance(mode, EditingMode):
            return False
        content = mode.content.strip()
        if not content:
            self.error = Messages.EMPTY_MESSAGE
            return False
        original = self._find(mode.message_id)
        if original is None:
            self.view_mode = IDLE
            return False
        if content == original.content:
            self.view_mode = IDLE
            return True

        token = self._selection
        try:
            result = await run_sync(self._messages.update, mode.message_id, content)
        except (AuthRequiredError, AuthExpiredError, ForbiddenError, ClientValidationError) as e:
            logger.warning("Editing message %s refused: %s", mode.message_id, e)
            if self._is_current(token):
                self.error = e.message
                self.view_mode = IDLE
            return False
        except MarketplaceError as e:
            logger.warning("Editing message %s failed, keeping it locally: %s", mode.message_id, e)
            if self._is_current(token):
                self._apply_edit(mode.message_id, content, None)
                self.error = Messages.EDIT_SAVED_LOCALLY
            return False
        if not self._is_current(token):
            return False
        updated = result.data if result.data and result.data.id == mode.message_id else None
        self._apply_edit(mode.message_id, content, updated)
        self.error = None
        return True

    async def delete_message(self, message_id: int, for_everyone: bool = False) -> bool:
        """
        Delete a message. The menu is closed afterwards in every case.

        A 403 keeps the message and shows the authorisation error; other
        failures remove it locally anyway.
        """
        message = self._find(message_id)
        if message is None:
            self.view_mode = IDLE
            return False
        token = self._selection
        message.is_deleting = True
        try:
            # Any 2xx counts as deleted; the body shape is not checked.
            await run_sync(self._messages.delete, message_id, for_everyone)
        except ForbiddenError as e:
            logger.warning("Delete of message %s forbidden: %s", message_id, e)
            if self._is_current(token):
                message.is_deleting = False
                self.error = Messages.DELETE_FORBIDDEN
                self.view_mode = IDLE
            return False
        except (AuthRequiredError, AuthExpiredError) as e:
            if self._is_current(token):
                message.is_deleting = False
                self.error = e.message
                self.view_mode = IDLE
            return False
        except MarketplaceError as e:
            logger.warning("Delete of message %s failed, removing locally: %s", message_id, e)
            if self._is_current(token):
                self._remove(message_id)
                self.error = Messages.DELETE_APPLIED_LOCALLY
                self.view_mode = IDLE
                await self._publish(EventTopic.MESSAGES_CHANGED, self.selected_partner_id)
            return False
        if not self._is_current(token):
            return True
        self._remove(message_id)
        self.error = None
        self.view_mode = IDLE
        await self._publish(EventTopic.MESSAGES_CHANGED, self.selected_partner_id)
        return True

    # Lifecycle

    def attach(self, scheduler: PollingScheduler) -> None:
        """Poll the conversation list and the open thread on the shared scheduler."""
        self._scheduler = scheduler
        scheduler.register(CONVERSATIONS_JOB, self.load_conversations)
        scheduler.register(MESSAGES_JOB, self.refresh_messages)

    def close(self) -> None:
        """Stop polling and ignore every response still in flight."""
        self._closed = True
        self._selection += 1
        if self._scheduler is not None:
            self._scheduler.unregister(CONVERSATIONS_JOB)
            self._scheduler.unregister(MESSAGES_JOB)
            self._scheduler = None
        self._unsubscribe()

    # Internals

    def _select(self, partner_id: int) -> int:
        self._selection += 1
        self.selected_partner_id = partner_id
        self.view_mode = IDLE
        self.error = None
        self.partner = None
        self.messages = []
        return self._selection

    def _is_current(self, token: int) -> bool:
        return not self._closed and token == self._selection

    def _zero_unread(self, partner_id: int) -> None:
        for conversation in self.conversations:
            if conversation.partner_id == partner_id:
                conversation.unread_count = 0

    def _own_thread(self, partner_id: int, messages: list[Message]) -> list[Message]:
        own = [m for m in messages if m.involves(partner_id)]
        if len(own) != len(messages):
            logger.warning(
                "Dropped %d message(s) not involving partner=%s",
                len(messages) - len(own),
                partner_id,
            )
        return own

    async def _resolve_partner(self, partner_id: int) -> Partner:
        if self._users is not None:
            try:
                return await run_sync(self._users.get_partner, partner_id)
            except MarketplaceError as e:
                logger.warning("Profile lookup for partner=%s failed: %s", partner_id, e)
        return Partner.placeholder(partner_id)

    def _find(self, message_id: int) -> Optional[Message]:
        return next((m for m in self.messages if m.id == message_id), None)

    def _remove(self, message_id: int) -> None:
        self.messages = [m for m in self.messages if m.id != message_id]

    def _apply_edit(self, message_id: int, content: str, updated: Optional[Message]) -> None:
        messages = []
        for m in self.messages:
            if m.id == message_id:
                m = updated or m.model_copy(
                    update={"content": content, "updated_at": utc_now()}
                )
            messages.append(m)
        self.messages = messages
        self.view_mode = IDLE

    def _local_message(
        self,
        partner_id: int,
        content: str,
        attachment: Optional[MediaAttachment],
    ) -> Message:
        now = utc_now()
        return Message(
            id=local_message_id(),
            sender_id=self.current_user_id or 0,
            receiver_id=partner_id,
            content=content,
            media_url=PENDING_UPLOAD_URL if attachment else None,
            media_type=attachment.media_type if attachment else None,
            is_read=False,
            created_at=now,
            updated_at=now,
            is_local=True,
        )

    def _patch_summary(
        self,
        partner_id: int,
        message: Message,
        attachment: Optional[MediaAttachment],
    ) -> None:
        media_type = message.media_type or (attachment.media_type if attachment else None)
        has_media = attachment is not None or bool(message.media_url)
        update = {
            "last_message": Messages.MEDIA_LABEL if has_media else message.content,
            "last_media_url": (message.media_url or PENDING_UPLOAD_URL) if has_media else None,
            "last_media_type": str(media_type) if has_media and media_type else None,
            "last_message_time": message.created_at or utc_now(),
        }
        for index, conversation in enumerate(self.conversations):
            if conversation.partner_id == partner_id:
                self.conversations[index] = conversation.model_copy(update=update)
                return
        partner = self.partner if self.partner and self.partner.id == partner_id else None
        self.conversations.insert(
            0,
            Conversation(
                partner_id=partner_id,
                partner_name=partner.display_name if partner else "",
                partner_photo=(partner.partner_photo or partner.photo) if partner else None,
                partner_role=(partner.partner_role or partner.role or "") if partner else "",
                unread_count=0,
                **update,
            ),
        )

    async def _on_session_ended(self, _payload: object = None) -> None:
        self.close_chat()
        self.conversations = []

    async def _publish(self, topic: EventTopic, payload: object = None) -> None:
        if self._closed:
            return
        await self._bus.publish(topic, payload)
