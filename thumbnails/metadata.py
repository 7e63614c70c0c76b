"""Resolve filename, directory and dimensions of an entity's artifact."""

from __future__ import annotations

import os
from dataclasses import dataclass

from config.settings import PREVIEWS_SIZE, THUMBNAILS_SIZE
from engine.paths import StoragePaths
from thumbnails.entities import Playlist, ThumbnailOwner, Video
from thumbnails.errors import ConfigurationError
from thumbnails.types import DEFAULT_OPTIONS, ImageSize, Thumbnail, ThumbnailOptions, ThumbnailType

_DEFAULT_SIZES = {
    ThumbnailType.MINIATURE: THUMBNAILS_SIZE,
    ThumbnailType.PREVIEW: PREVIEWS_SIZE,
}


@dataclass(frozen=True)
class ThumbnailMetadata:
    """Where and at which size an artifact is produced."""

    filename: str
    base_path: str
    output_path: str
    width: int
    height: int
    type: ThumbnailType
    existing_thumbnail: Thumbnail | None = None

    @property
    def size(self) -> ImageSize:
        return ImageSize(width=self.width, height=self.height)


def _build_metadata(
    owner: ThumbnailOwner,
    thumbnail_type: ThumbnailType,
    options: ThumbnailOptions,
    paths: StoragePaths,
) -> ThumbnailMetadata:
    filename = owner.generate_thumbnail_name(thumbnail_type, unique=options.unique_filename)
    base_path = paths.dir_for(thumbnail_type)
    size = options.resolve_size(_DEFAULT_SIZES[thumbnail_type])
    return ThumbnailMetadata(
        filename=filename,
        base_path=base_path,
        output_path=os.path.join(base_path, filename),
        width=size.width,
        height=size.height,
        type=thumbnail_type,
        existing_thumbnail=owner.existing_thumbnail(thumbnail_type),
    )


def check_video_type(thumbnail_type) -> None:
    if not isinstance(thumbnail_type, ThumbnailType):
        raise ConfigurationError(f"Unsupported thumbnail type for video: {thumbnail_type!r}")


def check_playlist_type(thumbnail_type) -> None:
    if thumbnail_type is not ThumbnailType.MINIATURE:
        raise ConfigurationError(f"Playlists only support miniatures, got {thumbnail_type!r}")


def build_metadata_from_video(
    video: Video,
    thumbnail_type: ThumbnailType,
    paths: StoragePaths,
    options: ThumbnailOptions = DEFAULT_OPTIONS,
) -> ThumbnailMetadata:
    check_video_type(thumbnail_type)
    return _build_metadata(video, thumbnail_type, options, paths)


def build_metadata_from_playlist(
    playlist: Playlist,
    paths: StoragePaths,
    options: ThumbnailOptions = DEFAULT_OPTIONS,
    thumbnail_type: ThumbnailType = ThumbnailType.MINIATURE,
) -> ThumbnailMetadata:
    check_playlist_type(thumbnail_type)
    return _build_metadata(playlist, thumbnail_type, options, paths)
