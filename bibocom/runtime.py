"""
Runtime: wires one session to the clients, controllers and badges.

A UI layer builds a ``Runtime``, awaits ``start()`` inside its event loop
and renders controller state; ``stop()`` tears everything down.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import requests

from bibocom.adapters import CartClient, MessageClient, OrderClient, UserClient
from bibocom.config import Settings, get_settings
from bibocom.constants.events import EventTopic
from bibocom.controllers.badges import CartBadge, UnreadBadge
from bibocom.controllers.cart_controller import CartController, Navigate
from bibocom.controllers.conversation_controller import ConversationController
from bibocom.core.events import EventBus
from bibocom.core.scheduler import PollingScheduler
from bibocom.core.session import AuthContext, SessionStore
from bibocom.infra.logging_config import LoggingConfig, get_logger
from bibocom.services.media_service import MediaService

logger = get_logger("runtime")


class Runtime:
    def __init__(
        self,
        auth: Optional[AuthContext] = None,
        settings: Optional[Settings] = None,
        navigate: Optional[Navigate] = None,
    ) -> None:
        self.settings = settings or get_settings()
        LoggingConfig(self.settings.log_level)
        self.auth = auth or AuthContext.from_store(SessionStore(self.settings.session_path))
        self.bus = EventBus()
        self.scheduler = PollingScheduler(self.settings.poll_interval_seconds)

        http = requests.Session()
        self.messages = MessageClient(self.auth, self.settings, http)
        self.carts = CartClient(self.auth, self.settings, http)
        self.orders = OrderClient(self.auth, self.settings, http)
        self.users = UserClient(self.auth, self.settings, http)
        self._http = http

        self.conversations = ConversationController(
            self.auth,
            self.messages,
            users=self.users,
            bus=self.bus,
            media=MediaService(self.settings.media_max_bytes),
        )
        self.cart = CartController(
            self.auth, self.carts, bus=self.bus, navigate=navigate, settings=self.settings
        )
        self.cart_badge = CartBadge(self.auth, self.carts)
        self.unread_badge = UnreadBadge(self.auth, self.messages)
        self._remove_logout_listener = self.auth.add_logout_listener(self._on_logout)
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._tasks: set[asyncio.Task] = set()

    async def start(self) -> None:
        self._loop = asyncio.get_running_loop()
        self.conversations.attach(self.scheduler)
        self.cart_badge.attach(self.scheduler, self.bus)
        self.unread_badge.attach(self.scheduler, self.bus)
        self.scheduler.start()
        await asyncio.gather(self.cart_badge.refresh(), self.unread_badge.refresh())
        logger.info("Runtime started for user=%s", self.auth.user_id)

    async def stop(self) -> None:
        self.conversations.close()
        self.cart.close()
        self.cart_badge.detach()
        self.unread_badge.detach()
        await self.scheduler.stop()
        self._remove_logout_listener()
        self._http.close()
        logger.info("Runtime stopped")

    def _on_logout(self) -> None:
        # Called from the worker thread that saw the 401.
        if self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._publish_session_ended)

    def _publish_session_ended(self) -> None:
        task = self._loop.create_task(self.bus.publish(EventTopic.SESSION_ENDED))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
