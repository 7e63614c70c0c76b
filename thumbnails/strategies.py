"""Sources that materialize thumbnail bytes at a resolved output path."""

from __future__ import annotations

import functools
import logging
import os
from dataclasses import dataclass
from typing import Protocol

import anyio

from config.settings import DEFAULT_AUDIO_BACKGROUND_COLOR, PREVIEWS_SIZE
from download.images import download_image
from media.frames import generate_image_from_video_file
from media.images import process_image, render_solid_background
from thumbnails.metadata import ThumbnailMetadata
from thumbnails.naming import matches_uuid_filename_scheme
from thumbnails.types import Thumbnail

logger = logging.getLogger(__name__)


class ThumbnailSource(Protocol):
    async def produce(self, metadata: ThumbnailMetadata) -> None:
        """Write the artifact bytes for ``metadata``."""


async def _run_blocking(func, *args, **kwargs):
    return await anyio.to_thread.run_sync(functools.partial(func, *args, **kwargs))


@dataclass(frozen=True)
class ExistingFileSource:
    """Resize a local file into place."""

    input_path: str
    keep_original: bool = False

    async def produce(self, metadata: ThumbnailMetadata) -> None:
        await _run_blocking(
            process_image,
            self.input_path,
            metadata.output_path,
            metadata.size,
            self.keep_original,
        )


@dataclass(frozen=True)
class RemoteUrlSource:
    """Download a remote image into place."""

    download_url: str

    async def produce(self, metadata: ThumbnailMetadata) -> None:
        await _run_blocking(
            download_image,
            self.download_url,
            metadata.base_path,
            metadata.filename,
            metadata.size,
        )


class NoopSource:
    """Source of an artifact that is already up to date."""

    async def produce(self, metadata: ThumbnailMetadata) -> None:
        logger.debug("Thumbnail %s is up to date, nothing to produce", metadata.filename)


@dataclass(frozen=True)
class VideoFrameSource:
    """Extract a representative frame, or use the audio background for audio-only media."""

    input_path: str
    is_audio: bool
    background_path: str

    async def produce(self, metadata: ThumbnailMetadata) -> None:
        if self.is_audio:
            await _run_blocking(self._process_background, metadata)
            return
        await _run_blocking(
            generate_image_from_video_file,
            self.input_path,
            metadata.base_path,
            metadata.filename,
            metadata.size,
        )

    def _process_background(self, metadata: ThumbnailMetadata) -> None:
        ensure_audio_background(self.background_path)
        process_image(self.background_path, metadata.output_path, metadata.size, keep_original=True)


def ensure_audio_background(path: str) -> str:
    """Create the fixed audio-only background image when it does not exist yet."""
    if not os.path.exists(path):
        render_solid_background(path, PREVIEWS_SIZE, DEFAULT_AUDIO_BACKGROUND_COLOR)
        logger.info("Created default audio background at %s", path)
    return path


@dataclass(frozen=True)
class UrlChangeDecision:
    changed: bool
    filename: str


def decide_url_change(
    download_url: str,
    existing_thumbnail: Thumbnail | None,
    resolved_filename: str,
    entity_uuid: str,
) -> UrlChangeDecision:
    """Decide whether a URL-sourced artifact needs to be fetched again.

    The artifact is up to date when its recorded URL equals ``download_url``
    and its filename does not follow the unique-per-entity filename scheme;
    the existing filename is then kept. Anything else is a change and adopts
    ``resolved_filename``.
    """
    existing_url = existing_thumbnail.file_url if existing_thumbnail else None
    existing_filename = existing_thumbnail.filename if existing_thumbnail else None

    changed = (
        not existing_url
        or existing_url != download_url
        or matches_uuid_filename_scheme(existing_filename, entity_uuid)
    )
    if changed or not existing_filename:
        return UrlChangeDecision(changed=True, filename=resolved_filename)
    return UrlChangeDecision(changed=False, filename=existing_filename)
