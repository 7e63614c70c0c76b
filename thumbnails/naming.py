"""Thumbnail filename schemes."""

from __future__ import annotations

import re
import secrets

from thumbnails.types import ThumbnailType

THUMBNAIL_EXTENSION = ".jpg"

_TYPE_SUFFIXES = {
    ThumbnailType.MINIATURE: "miniature",
    ThumbnailType.PREVIEW: "preview",
}

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9_-]")

# Unique-per-entity scheme: the filename ends with "<entity uuid>.jpg".
# Artifacts named this way are always treated as changed by URL change
# detection, whatever their recorded URL.
UUID_FILENAME_SCHEME = "{uuid}" + THUMBNAIL_EXTENSION


def sanitize_uuid(uuid: str) -> str:
    cleaned = _UNSAFE_CHARS_RE.sub("", str(uuid or ""))
    if not cleaned:
        raise ValueError("entity uuid is required to build a thumbnail filename")
    return cleaned


def build_thumbnail_filename(uuid: str, thumbnail_type: ThumbnailType, *, unique: bool = False) -> str:
    """Build the canonical filename of an entity's artifact.

    The name is stable for a given ``(uuid, type)`` pair. ``unique`` inserts a
    random token so a regeneration lands on a new file.
    """
    suffix = _TYPE_SUFFIXES.get(thumbnail_type)
    if suffix is None:
        raise ValueError(f"Unsupported thumbnail type: {thumbnail_type!r}")
    stem = sanitize_uuid(uuid)
    if unique:
        stem = f"{stem}-{secrets.token_hex(4)}"
    return f"{stem}-{suffix}{THUMBNAIL_EXTENSION}"


def matches_uuid_filename_scheme(filename: str | None, uuid: str) -> bool:
    """Return True when ``filename`` follows the unique-per-entity scheme."""
    if not filename or not uuid:
        return False
    return filename.endswith(UUID_FILENAME_SCHEME.format(uuid=uuid))
