"""Tests for the header badges."""

from unittest.mock import MagicMock

import pytest

from bibocom.adapters.cart_client import CartClient
from bibocom.adapters.message_client import MessageClient
from bibocom.constants.events import EventTopic
from bibocom.controllers.badges import Badge, CartBadge, UnreadBadge
from bibocom.core.errors import NetworkError
from bibocom.core.events import EventBus
from bibocom.core.scheduler import PollingScheduler


@pytest.fixture
def message_client():
    return MagicMock(spec=MessageClient)


@pytest.mark.asyncio
@pytest.mark.parametrize("count, label", [(0, ""), (7, "7"), (99, "99"), (150, "99+")])
async def test_unread_label(auth, message_client, count, label):
    message_client.unread_count.return_value = count
    badge = UnreadBadge(auth, message_client)

    assert await badge.refresh() == count
    assert badge.label == label


@pytest.mark.asyncio
async def test_refresh_failure_resets_count(auth, message_client):
    badge = UnreadBadge(auth, message_client)
    badge.count = 5
    message_client.unread_count.side_effect = NetworkError("down")

    assert await badge.refresh() == 0
    assert badge.failed


@pytest.mark.asyncio
async def test_logged_out_makes_no_call(anonymous_auth, message_client):
    badge = UnreadBadge(anonymous_auth, message_client)
    assert await badge.refresh() == 0
    message_client.unread_count.assert_not_called()


@pytest.mark.asyncio
async def test_cart_badge_follows_cart_updates(auth, make_cart):
    cart_client = MagicMock(spec=CartClient)
    cart_client.get_cart.return_value = make_cart((1, 3, 100, None), (2, 2, 100, None))
    bus = EventBus()
    scheduler = PollingScheduler(interval=60)
    badge = CartBadge(auth, cart_client)

    badge.attach(scheduler, bus)
    await bus.publish(EventTopic.CART_UPDATED, 5)

    assert badge.count == 5
    assert scheduler.job_names() == ["cart-badge"]

    await bus.publish(EventTopic.SESSION_ENDED)
    assert badge.count == 0

    badge.detach()
    assert scheduler.job_names() == []
    assert bus.subscriber_count(EventTopic.CART_UPDATED) == 0


def test_badge_requires_fetch(auth):
    with pytest.raises(TypeError):
        Badge(auth)
