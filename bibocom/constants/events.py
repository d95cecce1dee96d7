"""Event bus topics."""

from enum import StrEnum


class EventTopic(StrEnum):
    """Topics published on the client event bus."""

    CART_UPDATED = "cart-updated"
    MESSAGES_CHANGED = "messages-changed"
    CONVERSATIONS_CHANGED = "conversations-changed"
    SESSION_ENDED = "session-ended"
