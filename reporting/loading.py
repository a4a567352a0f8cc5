import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from .constants import LOADING_DELAY_MS, LOADING_MIN_MS

T = TypeVar("T")


async def with_smart_loading(
    work: Awaitable[T],
    delay_ms: float = LOADING_DELAY_MS,
    min_ms: float = LOADING_MIN_MS,
    on_busy: Optional[Callable[[bool], None]] = None,
) -> T:
    """Await ``work`` without busy-indicator flicker.

    Work finishing within ``delay_ms`` never raises the busy signal. Otherwise
    ``on_busy(True)`` fires at the delay and ``on_busy(False)`` no sooner than
    ``delay_ms + min_ms`` after start. Errors propagate immediately.
    """
    loop = asyncio.get_running_loop()
    start = loop.time()
    task = asyncio.ensure_future(work)

    done, _ = await asyncio.wait({task}, timeout=delay_ms / 1000)
    if done:
        return task.result()

    if on_busy:
        on_busy(True)
    try:
        value = await task
        remaining = (delay_ms + min_ms) / 1000 - (loop.time() - start)
        if remaining > 0:
            await asyncio.sleep(remaining)
        return value
    finally:
        if on_busy:
            on_busy(False)
