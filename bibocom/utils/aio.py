import asyncio
from typing import Any, Callable, TypeVar

T = TypeVar("T")


async def run_sync(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking transport call in a worker thread and await its result."""
    return await asyncio.to_thread(fn, *args, **kwargs)
