"""Public thumbnail generation operations for videos and playlists.

Every operation resolves metadata first (raising ``ConfigurationError`` for
an unsupported type before any I/O), then produces the bytes and returns the
created or updated ``Thumbnail``. Nothing is persisted: the caller commits
the record and, when ``previous_thumbnail_filename`` is set, removes the old
file after the commit (see ``db.thumbnails.ThumbnailStore.save``).
"""

from __future__ import annotations

import logging
from functools import lru_cache

from engine.paths import StoragePaths, build_storage_paths
from thumbnails.assembler import apply_metadata, create_thumbnail_from_function, with_filename
from thumbnails.entities import Playlist, Video, VideoFile
from thumbnails.metadata import (
    build_metadata_from_playlist,
    build_metadata_from_video,
    check_playlist_type,
    check_video_type,
)
from thumbnails.strategies import (
    ExistingFileSource,
    NoopSource,
    RemoteUrlSource,
    VideoFrameSource,
    decide_url_change,
)
from thumbnails.types import DEFAULT_OPTIONS, Thumbnail, ThumbnailOptions, ThumbnailType

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_default_paths() -> StoragePaths:
    return build_storage_paths()


def _remote_file_url(owner, download_url: str) -> str | None:
    # Only remote entities keep pointing at their origin.
    return None if owner.is_owned() else download_url


def _video_metadata(video, thumbnail_type, options, paths):
    # Default paths create the storage directories, so validate first.
    check_video_type(thumbnail_type)
    paths = paths or get_default_paths()
    return build_metadata_from_video(video, thumbnail_type, paths, options), paths


def _playlist_metadata(playlist, thumbnail_type, options, paths):
    check_playlist_type(thumbnail_type)
    paths = paths or get_default_paths()
    return build_metadata_from_playlist(playlist, paths, options, thumbnail_type)


async def create_video_miniature_from_existing(
    input_path: str,
    video: Video,
    thumbnail_type: ThumbnailType,
    options: ThumbnailOptions = DEFAULT_OPTIONS,
    paths: StoragePaths | None = None,
) -> Thumbnail:
    metadata, _ = _video_metadata(video, thumbnail_type, options, paths)
    source = ExistingFileSource(input_path, keep_original=options.keep_original)
    return await create_thumbnail_from_function(
        source,
        metadata,
        automatically_generated=options.automatically_generated,
    )


async def create_video_miniature_from_url(
    download_url: str,
    video: Video,
    thumbnail_type: ThumbnailType,
    options: ThumbnailOptions = DEFAULT_OPTIONS,
    paths: StoragePaths | None = None,
) -> Thumbnail:
    """Download a video artifact, skipping the fetch when it is already up to date."""
    metadata, _ = _video_metadata(video, thumbnail_type, options, paths)
    decision = decide_url_change(download_url, metadata.existing_thumbnail, metadata.filename, video.uuid)
    metadata = with_filename(metadata, decision.filename)

    if decision.changed:
        source = RemoteUrlSource(download_url)
    else:
        logger.info("Thumbnail url unchanged for video %s, keeping %s", video.uuid, decision.filename)
        source = NoopSource()

    return await create_thumbnail_from_function(
        source,
        metadata,
        file_url=_remote_file_url(video, download_url),
    )


async def generate_video_miniature(
    video: Video,
    video_file: VideoFile,
    thumbnail_type: ThumbnailType,
    options: ThumbnailOptions = DEFAULT_OPTIONS,
    paths: StoragePaths | None = None,
) -> Thumbnail:
    """Build a video artifact from the video's own media.

    Audio-only files get the fixed default background instead of a frame.
    """
    metadata, paths = _video_metadata(video, thumbnail_type, options, paths)
    source = VideoFrameSource(
        input_path=video.get_video_file_path(video_file, paths),
        is_audio=video_file.is_audio(),
        background_path=paths.default_audio_background,
    )
    return await create_thumbnail_from_function(source, metadata, automatically_generated=True)


def create_placeholder_thumbnail(
    file_url: str,
    video: Video,
    thumbnail_type: ThumbnailType,
    options: ThumbnailOptions = DEFAULT_OPTIONS,
    paths: StoragePaths | None = None,
) -> Thumbnail:
    """Build or update a metadata-only record; bytes are fetched later.

    Provenance (``automatically_generated``) of an existing record is kept.
    See ``thumbnails.lazy.materialize_placeholder``.
    """
    metadata, _ = _video_metadata(video, thumbnail_type, options, paths)
    return apply_metadata(metadata, file_url=file_url)


async def create_playlist_miniature_from_existing(
    input_path: str,
    playlist: Playlist,
    options: ThumbnailOptions = DEFAULT_OPTIONS,
    paths: StoragePaths | None = None,
    thumbnail_type: ThumbnailType = ThumbnailType.MINIATURE,
) -> Thumbnail:
    metadata = _playlist_metadata(playlist, thumbnail_type, options, paths)
    source = ExistingFileSource(input_path, keep_original=options.keep_original)
    return await create_thumbnail_from_function(
        source,
        metadata,
        automatically_generated=options.automatically_generated,
    )


async def create_playlist_miniature_from_url(
    download_url: str,
    playlist: Playlist,
    options: ThumbnailOptions = DEFAULT_OPTIONS,
    paths: StoragePaths | None = None,
    thumbnail_type: ThumbnailType = ThumbnailType.MINIATURE,
) -> Thumbnail:
    metadata = _playlist_metadata(playlist, thumbnail_type, options, paths)
    return await create_thumbnail_from_function(
        RemoteUrlSource(download_url),
        metadata,
        file_url=_remote_file_url(playlist, download_url),
    )
