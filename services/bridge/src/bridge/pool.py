"""Bounded concurrent dispatch for I/O-bound transfer work."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Iterable, List, TypeVar

T = TypeVar("T")
R = TypeVar("R")

MAX_CONCURRENT_TRANSFERS = 3


async def gather_bounded(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[R]],
    *,
    limit: int = MAX_CONCURRENT_TRANSFERS,
    return_exceptions: bool = False,
) -> List[Any]:
    """Run ``worker`` over ``items`` with at most ``limit`` running at once.

    Work is admitted in submission order and results are returned in that
    order. The first failure propagates; tasks already running are left to
    finish and their results dropped. With ``return_exceptions=True`` every
    task settles and failures come back as exception instances.
    """

    semaphore = asyncio.Semaphore(limit)

    async def _run(item: T) -> R:
        async with semaphore:
            return await worker(item)

    tasks = [asyncio.ensure_future(_run(item)) for item in items]
    if not tasks:
        return []
    try:
        return await asyncio.gather(*tasks, return_exceptions=return_exceptions)
    except BaseException:
        for task in tasks:
            # Retrieve stray failures so they are not reported as unhandled.
            task.add_done_callback(_consume_exception)
        raise


def _consume_exception(task: "asyncio.Future[Any]") -> None:
    if not task.cancelled():
        task.exception()


__all__ = ["MAX_CONCURRENT_TRANSFERS", "gather_bounded"]
