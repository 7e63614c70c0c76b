from __future__ import annotations

import os

import pytest

from engine.paths import build_storage_paths, resolve_dir
from thumbnails.entities import Playlist, ThumbnailOwner, Video, VideoFile
from thumbnails.errors import ConfigurationError
from thumbnails.types import Thumbnail, ThumbnailType


def test_videos_and_playlists_are_thumbnail_owners() -> None:
    assert isinstance(Video(uuid="v"), ThumbnailOwner)
    assert isinstance(Playlist(uuid="p"), ThumbnailOwner)


def test_remote_flag_drives_ownership() -> None:
    assert Video(uuid="v").is_owned() is True
    assert Video(uuid="v", remote=True).is_owned() is False
    assert Playlist(uuid="p", remote=True).is_owned() is False


def test_attach_thumbnail_replaces_record_of_same_type() -> None:
    video = Video(uuid="v")
    old = Thumbnail(filename="a.jpg", type=ThumbnailType.MINIATURE)
    new = Thumbnail(filename="b.jpg", type=ThumbnailType.MINIATURE)
    preview = Thumbnail(filename="p.jpg", type=ThumbnailType.PREVIEW)

    video.attach_thumbnail(old)
    video.attach_thumbnail(preview)
    video.attach_thumbnail(new)

    assert video.existing_thumbnail(ThumbnailType.MINIATURE) is new
    assert video.existing_thumbnail(ThumbnailType.PREVIEW) is preview
    assert len(video.thumbnails) == 2
    assert new.video_id == "v"


def test_playlist_only_names_miniatures() -> None:
    playlist = Playlist(uuid="p")

    assert playlist.generate_thumbnail_name(ThumbnailType.MINIATURE) == "p-miniature.jpg"
    with pytest.raises(ConfigurationError):
        playlist.generate_thumbnail_name(ThumbnailType.PREVIEW)
    with pytest.raises(ConfigurationError):
        playlist.existing_thumbnail(ThumbnailType.PREVIEW)


def test_audio_only_file_detection() -> None:
    assert VideoFile(filename="a.mp4", resolution=0).is_audio() is True
    assert VideoFile(filename="b.mp4", resolution=480).is_audio() is False


def test_video_file_path_stays_in_videos_dir(tmp_path) -> None:
    paths = build_storage_paths(tmp_path)
    video = Video(uuid="v")

    assert video.get_video_file_path(VideoFile("v-720.mp4", 720), paths) == os.path.join(paths.videos_dir, "v-720.mp4")
    with pytest.raises(ConfigurationError):
        video.get_video_file_path(VideoFile("../../etc/passwd", 720), paths)


def test_build_storage_paths_creates_directories(tmp_path) -> None:
    paths = build_storage_paths(tmp_path / "root")

    for folder in (paths.thumbnails_dir, paths.previews_dir, paths.videos_dir, paths.log_dir):
        assert os.path.isdir(folder)
    assert os.path.isdir(os.path.dirname(paths.db_path))
    assert paths.dir_for(ThumbnailType.MINIATURE) == paths.thumbnails_dir
    assert paths.dir_for(ThumbnailType.PREVIEW) == paths.previews_dir


def test_resolve_dir_rejects_escape(tmp_path) -> None:
    base = str(tmp_path)

    assert resolve_dir("", base) == base
    assert resolve_dir("sub", base) == os.path.join(base, "sub")
    with pytest.raises(ValueError):
        resolve_dir("../outside", base)
