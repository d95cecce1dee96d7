"""In-process publish/subscribe bus (cart-updated, messages-changed, ...)."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from bibocom.infra.logging_config import get_logger

logger = get_logger("events")

EventHandler = Callable[[Any], Union[None, Awaitable[None]]]


class EventBus:
    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = {}

    def subscribe(self, topic: str, handler: EventHandler) -> Callable[[], None]:
        """Register a handler; returns a callable that removes it."""
        self._handlers.setdefault(topic, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(topic, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def subscriber_count(self, topic: str) -> int:
        return len(self._handlers.get(topic, []))

    async def publish(self, topic: str, payload: Optional[Any] = None) -> None:
        """
        Deliver payload to every handler of topic, in subscription order.

        Handler failures are logged and do not reach the publisher.
        """
        for handler in list(self._handlers.get(topic, [])):
            try:
                result = handler(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning("Event handler for %s failed: %s", topic, e)
