"""Entities that own thumbnails: videos and playlists."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from engine.paths import StoragePaths, resolve_dir
from thumbnails.errors import ConfigurationError
from thumbnails.naming import build_thumbnail_filename
from thumbnails.types import Thumbnail, ThumbnailType


@runtime_checkable
class ThumbnailOwner(Protocol):
    uuid: str

    def generate_thumbnail_name(self, thumbnail_type: ThumbnailType, *, unique: bool = False) -> str:
        """Return the canonical artifact filename for ``thumbnail_type``."""

    def is_owned(self) -> bool:
        """Return True for locally authored content, False for federated content."""

    def existing_thumbnail(self, thumbnail_type: ThumbnailType) -> Thumbnail | None:
        """Return the attached record of ``thumbnail_type``, if any."""

    def attach_thumbnail(self, thumbnail: Thumbnail) -> None:
        """Attach ``thumbnail`` to the entity, replacing a record of the same type."""


# Resolution of an audio-only file (no visual track).
AUDIO_ONLY_RESOLUTION = 0


@dataclass
class VideoFile:
    filename: str
    resolution: int

    def is_audio(self) -> bool:
        return self.resolution == AUDIO_ONLY_RESOLUTION


@dataclass(eq=False)
class Video:
    uuid: str
    remote: bool = False
    thumbnails: list[Thumbnail] = field(default_factory=list)
    files: list[VideoFile] = field(default_factory=list)

    def generate_thumbnail_name(self, thumbnail_type: ThumbnailType, *, unique: bool = False) -> str:
        if not isinstance(thumbnail_type, ThumbnailType):
            raise ConfigurationError(f"Unsupported thumbnail type for video: {thumbnail_type!r}")
        return build_thumbnail_filename(self.uuid, thumbnail_type, unique=unique)

    def is_owned(self) -> bool:
        return not self.remote

    def existing_thumbnail(self, thumbnail_type: ThumbnailType) -> Thumbnail | None:
        for thumbnail in self.thumbnails or []:
            if thumbnail.type is thumbnail_type:
                return thumbnail
        return None

    def attach_thumbnail(self, thumbnail: Thumbnail) -> None:
        thumbnail.video_id = self.uuid
        self.thumbnails = [t for t in self.thumbnails if t.type is not thumbnail.type]
        self.thumbnails.append(thumbnail)

    def get_video_file_path(self, video_file: VideoFile, paths: StoragePaths) -> str:
        try:
            return resolve_dir(video_file.filename, paths.videos_dir)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid video file {video_file.filename!r}: {exc}") from exc


@dataclass(eq=False)
class Playlist:
    uuid: str
    remote: bool = False
    thumbnail: Thumbnail | None = None

    def generate_thumbnail_name(self, thumbnail_type: ThumbnailType, *, unique: bool = False) -> str:
        if thumbnail_type is not ThumbnailType.MINIATURE:
            raise ConfigurationError(f"Playlists only support miniatures, got {thumbnail_type!r}")
        return build_thumbnail_filename(self.uuid, thumbnail_type, unique=unique)

    def is_owned(self) -> bool:
        return not self.remote

    def existing_thumbnail(self, thumbnail_type: ThumbnailType) -> Thumbnail | None:
        if thumbnail_type is not ThumbnailType.MINIATURE:
            raise ConfigurationError(f"Playlists only support miniatures, got {thumbnail_type!r}")
        return self.thumbnail

    def attach_thumbnail(self, thumbnail: Thumbnail) -> None:
        thumbnail.video_playlist_id = self.uuid
        self.thumbnail = thumbnail
