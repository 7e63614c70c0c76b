"""Deferred materialization of placeholder thumbnails."""

from __future__ import annotations

import logging
import os

import anyio

from download.images import download_image
from engine.paths import StoragePaths
from thumbnails.errors import FetchError
from thumbnails.types import ImageSize, Thumbnail

logger = logging.getLogger(__name__)


async def materialize_placeholder(thumbnail: Thumbnail, paths: StoragePaths) -> str:
    """Fetch the bytes of a placeholder record when its local file is missing.

    Returns the local file path. Records that already have a local file are
    left untouched.

    Raises:
        FetchError: If the record has no remote URL or the download fails.
    """
    local_path = thumbnail.get_file_path(paths)
    if os.path.exists(local_path):
        return local_path
    if not thumbnail.file_url:
        raise FetchError(f"Thumbnail {thumbnail.filename} has no local file and no remote url")
    if not thumbnail.width or not thumbnail.height:
        raise FetchError(f"Thumbnail {thumbnail.filename} has no target dimensions")

    size = ImageSize(width=thumbnail.width, height=thumbnail.height)
    logger.info("Materializing placeholder %s from %s", thumbnail.filename, thumbnail.file_url)
    await anyio.to_thread.run_sync(
        download_image,
        thumbnail.file_url,
        os.path.dirname(local_path),
        thumbnail.filename,
        size,
    )
    return local_path
