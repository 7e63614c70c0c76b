from __future__ import annotations

import asyncio

from thumbnails.locks import GenerationLocks
from thumbnails.types import ThumbnailType


def test_same_entity_and_type_is_serialized() -> None:
    locks = GenerationLocks()
    events: list[str] = []

    async def _generate(name: str) -> None:
        async with locks.hold("video-1", ThumbnailType.MINIATURE):
            events.append(f"{name}:start")
            await asyncio.sleep(0.01)
            events.append(f"{name}:end")

    async def _main() -> None:
        await asyncio.gather(_generate("a"), _generate("b"))

    asyncio.run(_main())

    assert events == ["a:start", "a:end", "b:start", "b:end"]
    assert len(locks) == 0


def test_different_types_do_not_block_each_other() -> None:
    locks = GenerationLocks()
    events: list[str] = []

    async def _generate(thumbnail_type: ThumbnailType) -> None:
        async with locks.hold("video-1", thumbnail_type):
            events.append(f"{thumbnail_type.name}:start")
            await asyncio.sleep(0.01)
            events.append(f"{thumbnail_type.name}:end")

    async def _main() -> None:
        await asyncio.gather(_generate(ThumbnailType.MINIATURE), _generate(ThumbnailType.PREVIEW))

    asyncio.run(_main())

    assert events[:2] == ["MINIATURE:start", "PREVIEW:start"]


def test_lock_is_released_when_generation_fails() -> None:
    locks = GenerationLocks()

    async def _main() -> bool:
        try:
            async with locks.hold("video-1", ThumbnailType.MINIATURE):
                assert locks.is_locked("video-1", ThumbnailType.MINIATURE)
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        return locks.is_locked("video-1", ThumbnailType.MINIATURE)

    assert asyncio.run(_main()) is False
    assert len(locks) == 0
