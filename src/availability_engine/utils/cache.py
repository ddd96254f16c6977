"""Time-bounded get-or-compute cache used for credential-scoped lookups."""
from __future__ import annotations

import time
from typing import Any, Awaitable, Callable, Dict, Protocol, Tuple, TypeVar

T = TypeVar("T")


class TtlCache(Protocol):
    async def get_or_exec(self, key: str, compute: Callable[[], Awaitable[T]], ttl_s: float) -> T:
        ...


class MemoryTtlCache:
    """In-process cache keeping computed values until their TTL elapses."""

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}

    async def get_or_exec(self, key: str, compute: Callable[[], Awaitable[T]], ttl_s: float) -> T:
        now = self._clock()
        entry = self._entries.get(key)
        if entry is not None and entry[0] > now:
            return entry[1]
        value = await compute()
        self._entries[key] = (now + ttl_s, value)
        return value

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
