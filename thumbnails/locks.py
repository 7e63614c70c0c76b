"""Per-entity serialization of thumbnail generation."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from thumbnails.types import ThumbnailType


class GenerationLocks:
    """One ``asyncio.Lock`` per ``(entity uuid, thumbnail type)``.

    Two generations for the same entity and type never run concurrently,
    so they cannot race on the same output file. Locks are dropped once no
    task holds or waits on them.
    """

    def __init__(self) -> None:
        self._locks: dict[tuple[str, ThumbnailType], asyncio.Lock] = {}
        self._waiters: dict[tuple[str, ThumbnailType], int] = {}

    @asynccontextmanager
    async def hold(self, entity_uuid: str, thumbnail_type: ThumbnailType) -> AsyncIterator[None]:
        key = (entity_uuid, thumbnail_type)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    def is_locked(self, entity_uuid: str, thumbnail_type: ThumbnailType) -> bool:
        lock = self._locks.get((entity_uuid, thumbnail_type))
        return bool(lock and lock.locked())

    def __len__(self) -> int:
        return len(self._locks)
