"""Thumbnail record and value types."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from engine.paths import StoragePaths


class ThumbnailType(Enum):
    MINIATURE = 1
    PREVIEW = 2


@dataclass(frozen=True)
class ImageSize:
    width: int
    height: int

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be an integer")
            if value <= 0:
                raise ValueError(f"{name} must be > 0")


class UseDefault:
    """Marker for "no size override, use the per-type default"."""

    _instance: UseDefault | None = None

    def __new__(cls) -> UseDefault:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "USE_DEFAULT"


USE_DEFAULT = UseDefault()

SizeOverride = Union[ImageSize, UseDefault]


@dataclass(frozen=True)
class ThumbnailOptions:
    """Per-call generation options.

    Attributes:
        size: explicit target size, or ``USE_DEFAULT`` for the per-type default.
            An override changes dimensions only, never the target directory.
        keep_original: keep the input file of an existing-file generation
            instead of consuming it.
        automatically_generated: provenance flag stored on the record;
            frame extraction always forces ``True``.
        unique_filename: generate a fresh filename instead of the stable
            per-entity one, staging the old file for deletion.
    """

    size: SizeOverride = USE_DEFAULT
    keep_original: bool = False
    automatically_generated: bool | None = None
    unique_filename: bool = False

    def resolve_size(self, default: ImageSize) -> ImageSize:
        if isinstance(self.size, UseDefault):
            return default
        return self.size


DEFAULT_OPTIONS = ThumbnailOptions()


@dataclass(eq=False)
class Thumbnail:
    """Persisted miniature/preview record of a video or playlist.

    ``eq=False`` keeps identity semantics: a regeneration mutates the same
    object, and callers compare records with ``is``.
    """

    filename: str | None = None
    width: int | None = None
    height: int | None = None
    type: ThumbnailType | None = None
    file_url: str | None = None
    automatically_generated: bool | None = None
    previous_thumbnail_filename: str | None = None
    id: int | None = None
    video_id: str | None = None
    video_playlist_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = field(default=None)

    def get_file_path(self, paths: StoragePaths) -> str:
        if self.type is None or not self.filename:
            raise ValueError("thumbnail has no type or filename yet")
        return os.path.join(paths.dir_for(self.type), self.filename)

    def get_previous_file_path(self, paths: StoragePaths) -> str | None:
        if self.type is None or not self.previous_thumbnail_filename:
            return None
        return os.path.join(paths.dir_for(self.type), self.previous_thumbnail_filename)

    def is_placeholder(self, paths: StoragePaths) -> bool:
        """Return True when the record has no local bytes yet."""
        return not os.path.exists(self.get_file_path(paths))

    def consume_previous_filename(self) -> str | None:
        previous = self.previous_thumbnail_filename
        self.previous_thumbnail_filename = None
        return previous

    def __repr__(self) -> str:
        return (
            "Thumbnail("
            f"id={self.id!r}, filename={self.filename!r}, type={self.type!r}, "
            f"width={self.width!r}, height={self.height!r}, file_url={self.file_url!r}, "
            f"automatically_generated={self.automatically_generated!r}, "
            f"previous_thumbnail_filename={self.previous_thumbnail_filename!r})"
        )


__all__ = [
    "DEFAULT_OPTIONS",
    "ImageSize",
    "SizeOverride",
    "Thumbnail",
    "ThumbnailOptions",
    "ThumbnailType",
    "USE_DEFAULT",
    "UseDefault",
]
