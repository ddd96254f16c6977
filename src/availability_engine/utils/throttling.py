"""Helpers for bounding concurrent upstream work."""
from __future__ import annotations

import asyncio
from typing import Awaitable, Iterable, List, TypeVar

T = TypeVar("T")

DEFAULT_CONCURRENCY = 10


async def gather_bounded(awaitables: Iterable[Awaitable[T]], limit: int = DEFAULT_CONCURRENCY) -> List[T]:
    """Await ``awaitables`` with at most ``limit`` in flight, preserving input order."""
    if limit <= 0:
        raise ValueError("limit must be positive")
    semaphore = asyncio.Semaphore(limit)

    async def _run(awaitable: Awaitable[T]) -> T:
        async with semaphore:
            return await awaitable

    return list(await asyncio.gather(*(_run(item) for item in awaitables)))
