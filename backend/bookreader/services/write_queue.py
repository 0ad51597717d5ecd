"""
Per-key write serialization.

Each storage key gets its own asyncio lock. A writer holds the slot for the
whole read-modify-write cycle, so a second writer always sees the first
writer's result instead of a stale snapshot. asyncio locks wake waiters in
FIFO order, which keeps writes in the order user actions were issued.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

logger = logging.getLogger(__name__)


class DocumentWriteQueue:
    """Allows a single in-flight write per key; later writers wait their turn."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    @asynccontextmanager
    async def slot(self, key: str) -> AsyncIterator[None]:
        lock = self._lock_for(key)
        if lock.locked():
            logger.debug(f"Write for {key} queued behind an in-flight write")
        async with lock:
            yield

    def is_busy(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()
