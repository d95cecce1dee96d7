"""Tests for Runtime wiring."""

import asyncio
from unittest.mock import patch

import pytest

from bibocom.constants.events import EventTopic
from bibocom.runtime import Runtime
from tests.fixtures.http_fixtures import make_response


@pytest.fixture
def runtime(auth, settings):
    with patch("bibocom.runtime.requests.Session") as session_cls:
        session_cls.return_value.request.return_value = make_response(
            200, {"cart": {"items": []}, "unreadCount": 3}
        )
        yield Runtime(auth=auth, settings=settings)


@pytest.mark.asyncio
async def test_start_refreshes_badges_and_registers_jobs(runtime):
    await runtime.start()
    try:
        assert runtime.unread_badge.count == 3
        assert runtime.cart_badge.count == 0
        assert runtime.scheduler.is_running
        assert set(runtime.scheduler.job_names()) == {
            "conversations",
            "conversation-messages",
            "cart-badge",
            "unread-badge",
        }
    finally:
        await runtime.stop()

    assert not runtime.scheduler.is_running
    assert runtime.scheduler.job_names() == []


@pytest.mark.asyncio
async def test_logout_in_worker_thread_publishes_session_ended(runtime):
    ended = asyncio.Event()
    runtime.bus.subscribe(EventTopic.SESSION_ENDED, lambda _payload: ended.set())
    await runtime.start()
    try:
        await asyncio.to_thread(runtime.auth.logout)
        await asyncio.wait_for(ended.wait(), timeout=1)
    finally:
        await runtime.stop()

    assert runtime.unread_badge.count == 0


@pytest.mark.asyncio
async def test_session_ended_task_is_held_until_done(runtime):
    gate = asyncio.Event()

    async def slow_handler(_payload):
        await gate.wait()

    runtime.bus.subscribe(EventTopic.SESSION_ENDED, slow_handler)
    await runtime.start()
    try:
        await asyncio.to_thread(runtime.auth.logout)
        while not runtime._tasks:
            await asyncio.sleep(0)
        (task,) = runtime._tasks
        assert not task.done()

        gate.set()
        await asyncio.wait_for(task, timeout=1)
        await asyncio.sleep(0)
        assert runtime._tasks == set()
    finally:
        await runtime.stop()
