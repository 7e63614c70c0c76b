from __future__ import annotations

import asyncio
import os

import pytest

from thumbnails.builder import create_placeholder_thumbnail
from thumbnails.entities import Video
from thumbnails.errors import FetchError
from thumbnails.lazy import materialize_placeholder
from thumbnails.types import Thumbnail, ThumbnailType


def test_materialize_downloads_missing_placeholder(storage_paths, monkeypatch) -> None:
    calls = []

    def _fake_download(url, folder, filename, size):
        calls.append((url, folder, filename, size.width, size.height))
        with open(os.path.join(folder, filename), "wb") as handle:
            handle.write(b"jpeg")

    monkeypatch.setattr("thumbnails.lazy.download_image", _fake_download)
    thumbnail = create_placeholder_thumbnail(
        "http://origin/static/r1.jpg", Video(uuid="r1", remote=True), ThumbnailType.PREVIEW, paths=storage_paths
    )

    path = asyncio.run(materialize_placeholder(thumbnail, storage_paths))

    assert path == os.path.join(storage_paths.previews_dir, "r1-preview.jpg")
    assert os.path.exists(path)
    assert calls == [
        ("http://origin/static/r1.jpg", storage_paths.previews_dir, "r1-preview.jpg", thumbnail.width, thumbnail.height)
    ]
    assert thumbnail.is_placeholder(storage_paths) is False


def test_materialize_skips_existing_file(storage_paths, monkeypatch) -> None:
    monkeypatch.setattr("thumbnails.lazy.download_image", lambda *args: pytest.fail("unexpected download"))
    thumbnail = Thumbnail(filename="r1-miniature.jpg", type=ThumbnailType.MINIATURE, file_url="http://o/x.jpg")
    local = os.path.join(storage_paths.thumbnails_dir, "r1-miniature.jpg")
    with open(local, "wb") as handle:
        handle.write(b"jpeg")

    assert asyncio.run(materialize_placeholder(thumbnail, storage_paths)) == local


def test_materialize_without_remote_url_fails(storage_paths) -> None:
    thumbnail = Thumbnail(filename="local.jpg", type=ThumbnailType.MINIATURE, width=10, height=10)

    with pytest.raises(FetchError):
        asyncio.run(materialize_placeholder(thumbnail, storage_paths))
