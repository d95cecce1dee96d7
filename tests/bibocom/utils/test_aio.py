"""Tests for the thread bridge."""

import threading

import pytest

from bibocom.utils.aio import run_sync


@pytest.mark.asyncio
async def test_run_sync_runs_off_the_loop_thread():
    loop_thread = threading.get_ident()

    result = await run_sync(lambda a, b=0: (a + b, threading.get_ident()), 1, b=2)

    assert result[0] == 3
    assert result[1] != loop_thread
