"""
Single polling scheduler shared by every periodic refresh.

Badges and the open conversation register jobs here instead of each owning
a timer, so there is one loop task to start and stop, and a job that is
still running is never started a second time.
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional

from bibocom.config import get_settings
from bibocom.infra.logging_config import get_logger

logger = get_logger("scheduler")

PollJob = Callable[[], Awaitable[None]]


@dataclass
class _Registration:
    name: str
    job: PollJob
    interval: float
    next_run_at: float
    running: Optional[asyncio.Task] = field(default=None)

    @property
    def is_running(self) -> bool:
        return self.running is not None and not self.running.done()


class PollingScheduler:
    def __init__(self, interval: Optional[float] = None) -> None:
        self._default_interval = interval or get_settings().poll_interval_seconds
        self._jobs: Dict[str, _Registration] = {}
        self._loop_task: Optional[asyncio.Task] = None
        self._wakeup = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def job_names(self) -> list[str]:
        return list(self._jobs)

    def register(
        self, name: str, job: PollJob, interval: Optional[float] = None
    ) -> None:
        """Add a job. The first run happens one interval from now."""
        if name in self._jobs:
            raise ValueError(f"Polling job already registered: {name}")
        interval = interval or self._default_interval
        self._jobs[name] = _Registration(
            name=name,
            job=job,
            interval=interval,
            next_run_at=time.monotonic() + interval,
        )
        self._wakeup.set()

    def unregister(self, name: str) -> None:
        registration = self._jobs.pop(name, None)
        if registration and registration.is_running:
            registration.running.cancel()

    def start(self) -> None:
        """Start the loop task on the running event loop."""
        if self.is_running:
            return
        self._loop_task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        """Cancel the loop and every in-flight job."""
        tasks = [r.running for r in self._jobs.values() if r.is_running]
        if self._loop_task is not None:
            tasks.append(self._loop_task)
            self._loop_task = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def run_now(self, name: str) -> None:
        """Run a job immediately (awaiting it) and restart its interval."""
        registration = self._jobs.get(name)
        if registration is None:
            raise KeyError(name)
        if registration.is_running:
            await asyncio.shield(registration.running)
            return
        registration.next_run_at = time.monotonic() + registration.interval
        registration.running = asyncio.ensure_future(self._execute(registration))
        await registration.running

    async def _run(self) -> None:
        while True:
            now = time.monotonic()
            for registration in list(self._jobs.values()):
                if registration.next_run_at > now:
                    continue
                registration.next_run_at = now + registration.interval
                if registration.is_running:
                    logger.debug("Skipping %s: previous run still in flight", registration.name)
                    continue
                registration.running = asyncio.ensure_future(
                    self._execute(registration)
                )
            self._wakeup.clear()
            delay = self._next_delay()
            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass

    def _next_delay(self) -> float:
        if not self._jobs:
            return self._default_interval
        soonest = min(r.next_run_at for r in self._jobs.values())
        return max(0.0, soonest - time.monotonic())

    async def _execute(self, registration: _Registration) -> None:
        try:
            await registration.job()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Polling job %s failed: %s", registration.name, e)
