from __future__ import annotations

import io

import pytest
import requests
from PIL import Image

from download.images import download_image
from thumbnails.errors import FetchError
from thumbnails.types import ImageSize


def _jpeg_bytes(size=(400, 200)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (0, 120, 200)).save(buffer, format="JPEG")
    return buffer.getvalue()


class _FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200) -> None:
        self._content = content
        self.status_code = status_code
        self.ok = 200 <= status_code < 300

    def iter_content(self, chunk_size: int = 1):
        for start in range(0, len(self._content), chunk_size):
            yield self._content[start:start + chunk_size]

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False


def _patch_get(monkeypatch, response=None, error=None):
    calls = []

    def _fake_get(url, timeout, stream):
        calls.append(url)
        if error is not None:
            raise error
        return response

    monkeypatch.setattr("download.images.requests.get", _fake_get)
    return calls


def test_download_image_writes_resized_file(monkeypatch, tmp_path) -> None:
    calls = _patch_get(monkeypatch, _FakeResponse(_jpeg_bytes()))

    written = download_image("http://a/new.jpg", str(tmp_path), "thumb.jpg", ImageSize(width=280, height=157))

    assert calls == ["http://a/new.jpg"]
    assert written == ImageSize(width=280, height=157)
    with Image.open(tmp_path / "thumb.jpg") as image:
        assert image.size == (280, 157)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["thumb.jpg"]


def test_download_image_non_2xx_raises_fetch_error(monkeypatch, tmp_path) -> None:
    _patch_get(monkeypatch, _FakeResponse(b"missing", status_code=404))

    with pytest.raises(FetchError, match="HTTP 404"):
        download_image("http://a/404.jpg", str(tmp_path), "thumb.jpg", ImageSize(width=10, height=10))
    assert list(tmp_path.iterdir()) == []


def test_download_image_network_error_raises_fetch_error(monkeypatch, tmp_path) -> None:
    _patch_get(monkeypatch, error=requests.ConnectionError("boom"))

    with pytest.raises(FetchError):
        download_image("http://a/x.jpg", str(tmp_path), "thumb.jpg", ImageSize(width=10, height=10))


def test_download_image_invalid_payload_keeps_existing_file(monkeypatch, tmp_path) -> None:
    existing = tmp_path / "thumb.jpg"
    existing.write_bytes(_jpeg_bytes((50, 50)))
    _patch_get(monkeypatch, _FakeResponse(b"<html>not an image</html>"))

    with pytest.raises(FetchError, match="Invalid image payload"):
        download_image("http://a/x.jpg", str(tmp_path), "thumb.jpg", ImageSize(width=10, height=10))

    with Image.open(existing) as image:
        assert image.size == (50, 50)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["thumb.jpg"]


def test_download_image_rejects_oversized_payload(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr("download.images.DOWNLOAD_MAX_BYTES", 16)
    _patch_get(monkeypatch, _FakeResponse(_jpeg_bytes()))

    with pytest.raises(FetchError, match="exceeds"):
        download_image("http://a/big.jpg", str(tmp_path), "thumb.jpg", ImageSize(width=10, height=10))


def test_download_image_requires_url(tmp_path) -> None:
    with pytest.raises(FetchError):
        download_image("  ", str(tmp_path), "thumb.jpg", ImageSize(width=10, height=10))
