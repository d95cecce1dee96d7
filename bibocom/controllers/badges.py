"""Cart and unread-message counters shown in the header."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional

from bibocom.adapters.cart_client import CartClient
from bibocom.adapters.message_client import MessageClient
from bibocom.constants.events import EventTopic
from bibocom.core.errors import MarketplaceError
from bibocom.core.events import EventBus
from bibocom.core.scheduler import PollingScheduler
from bibocom.core.session import AuthContext
from bibocom.infra.logging_config import get_logger
from bibocom.utils.aio import run_sync

logger = get_logger("badges")

BADGE_CAP = 99


class Badge(ABC):
    """A polled counter. Subclasses implement ``_fetch``."""

    job_name = "badge"
    refresh_topics: tuple[EventTopic, ...] = ()

    def __init__(self, auth: AuthContext) -> None:
        self._auth = auth
        self.count = 0
        self.failed = False
        self._scheduler: Optional[PollingScheduler] = None
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def label(self) -> str:
        if self.count <= 0:
            return ""
        if self.count > BADGE_CAP:
            return f"{BADGE_CAP}+"
        return str(self.count)

    async def refresh(self, _payload: object = None) -> int:
        if not self._auth.is_authenticated:
            self.count = 0
            self.failed = False
            return 0
        try:
            self.count = await run_sync(self._fetch)
            self.failed = False
        except MarketplaceError as e:
            logger.warning("Refreshing %s failed: %s", self.job_name, e)
            self.count = 0
            self.failed = True
        return self.count

    def attach(self, scheduler: PollingScheduler, bus: Optional[EventBus] = None) -> None:
        self._scheduler = scheduler
        scheduler.register(self.job_name, self.refresh)
        if bus is not None:
            for topic in self.refresh_topics:
                self._unsubscribers.append(bus.subscribe(topic, self.refresh))
            self._unsubscribers.append(
                bus.subscribe(EventTopic.SESSION_ENDED, self._reset)
            )

    def detach(self) -> None:
        if self._scheduler is not None:
            self._scheduler.unregister(self.job_name)
            self._scheduler = None
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _reset(self, _payload: object = None) -> None:
        self.count = 0
        self.failed = False

    @abstractmethod
    def _fetch(self) -> int:
        """Blocking call returning the current count."""
        ...


class CartBadge(Badge):
    """Total item quantity in the cart; refreshed on cart-updated too."""

    job_name = "cart-badge"
    refresh_topics = (EventTopic.CART_UPDATED,)

    def __init__(self, auth: AuthContext, cart: CartClient) -> None:
        super().__init__(auth)
        self._cart = cart

    def _fetch(self) -> int:
        return self._cart.get_cart().items_count


class UnreadBadge(Badge):
    job_name = "unread-badge"
    refresh_topics = (EventTopic.MESSAGES_CHANGED,)

    def __init__(self, auth: AuthContext, messages: MessageClient) -> None:
        super().__init__(auth)
        self._messages = messages

    def _fetch(self) -> int:
        return self._messages.unread_count()
