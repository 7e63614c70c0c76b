"""Apply a source to resolved metadata and update the thumbnail record."""

from __future__ import annotations

import dataclasses
import logging
import os

from thumbnails.metadata import ThumbnailMetadata
from thumbnails.strategies import ThumbnailSource
from thumbnails.types import Thumbnail

logger = logging.getLogger(__name__)

# Leaves ``automatically_generated`` of an existing record as it is.
KEEP_EXISTING = object()


def with_filename(metadata: ThumbnailMetadata, filename: str) -> ThumbnailMetadata:
    """Return ``metadata`` retargeted at ``filename`` in the same directory."""
    if filename == metadata.filename:
        return metadata
    return dataclasses.replace(
        metadata,
        filename=filename,
        output_path=os.path.join(metadata.base_path, filename),
    )


def _stage_previous_filename(thumbnail: Thumbnail, metadata: ThumbnailMetadata) -> None:
    current = thumbnail.filename
    if not current or current == metadata.filename:
        return

    pending = thumbnail.previous_thumbnail_filename
    if not pending or pending == current:
        thumbnail.previous_thumbnail_filename = current
        logger.debug("Staged previous thumbnail %s for removal", current)
        return

    # A staged name is only cleared by a successful save, so ``pending`` is the
    # committed file and ``current`` was never persisted.
    logger.warning(
        "Thumbnail %s was renamed again before being saved, discarding uncommitted %s",
        pending,
        current,
    )
    try:
        os.remove(os.path.join(metadata.base_path, current))
    except FileNotFoundError:
        pass
    if pending == metadata.filename:
        thumbnail.previous_thumbnail_filename = None


def apply_metadata(
    metadata: ThumbnailMetadata,
    *,
    file_url: str | None = None,
    automatically_generated=KEEP_EXISTING,
) -> Thumbnail:
    """Write ``metadata`` onto the existing record, or a new one.

    When the record already carries a different filename, that filename is
    staged in ``previous_thumbnail_filename`` so the caller can remove the old
    file once the new record is committed. A rename on top of a pending one
    keeps the committed filename staged.

    ``automatically_generated`` is left untouched unless given.
    """
    existing = metadata.existing_thumbnail
    thumbnail = existing if existing is not None else Thumbnail()

    _stage_previous_filename(thumbnail, metadata)

    thumbnail.filename = metadata.filename
    thumbnail.width = metadata.width
    thumbnail.height = metadata.height
    thumbnail.type = metadata.type
    thumbnail.file_url = file_url
    if automatically_generated is not KEEP_EXISTING:
        thumbnail.automatically_generated = automatically_generated
    return thumbnail


async def create_thumbnail_from_function(
    source: ThumbnailSource,
    metadata: ThumbnailMetadata,
    *,
    file_url: str | None = None,
    automatically_generated: bool | None = None,
) -> Thumbnail:
    """Produce the artifact through ``source`` and return the updated record.

    The record is not persisted here. The existing record is only mutated
    once ``source`` succeeds; a source failure propagates unchanged and
    leaves the record as it was.
    """
    await source.produce(metadata)
    return apply_metadata(
        metadata,
        file_url=file_url,
        automatically_generated=automatically_generated,
    )
