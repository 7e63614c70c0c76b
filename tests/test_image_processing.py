from __future__ import annotations

import pytest
from PIL import Image

from media.images import process_image, render_solid_background
from thumbnails.errors import ImageProcessingError
from thumbnails.types import ImageSize


def test_process_image_writes_exact_target_size(tmp_path, make_image) -> None:
    source = make_image(size=(1000, 300))
    output = tmp_path / "out" / "thumb.jpg"

    written = process_image(str(source), str(output), ImageSize(width=280, height=157), keep_original=True)

    assert written == ImageSize(width=280, height=157)
    with Image.open(output) as image:
        assert image.size == (280, 157)
        assert image.format == "JPEG"


def test_process_image_removes_input_unless_kept(tmp_path, make_image) -> None:
    consumed = make_image("consumed.png")
    kept = make_image("kept.png")

    process_image(str(consumed), str(tmp_path / "a.jpg"), ImageSize(width=10, height=10))
    process_image(str(kept), str(tmp_path / "b.jpg"), ImageSize(width=10, height=10), keep_original=True)

    assert not consumed.exists()
    assert kept.exists()


def test_process_image_in_place_keeps_the_file(make_image) -> None:
    source = make_image("same.jpg")

    process_image(str(source), str(source), ImageSize(width=20, height=20))

    with Image.open(source) as image:
        assert image.size == (20, 20)


def test_process_image_rejects_non_image_input(tmp_path) -> None:
    bogus = tmp_path / "bogus.jpg"
    bogus.write_bytes(b"not an image")

    with pytest.raises(ImageProcessingError):
        process_image(str(bogus), str(tmp_path / "out.jpg"), ImageSize(width=10, height=10))
    assert not (tmp_path / "out.jpg").exists()


def test_process_image_rejects_missing_input(tmp_path) -> None:
    with pytest.raises(ImageProcessingError):
        process_image(str(tmp_path / "missing.png"), str(tmp_path / "out.jpg"), ImageSize(width=10, height=10))


def test_failed_processing_keeps_previous_output(tmp_path, make_image) -> None:
    output = tmp_path / "thumb.jpg"
    process_image(str(make_image()), str(output), ImageSize(width=30, height=30))
    bogus = tmp_path / "bogus.png"
    bogus.write_bytes(b"\x00" * 16)

    with pytest.raises(ImageProcessingError):
        process_image(str(bogus), str(output), ImageSize(width=99, height=99))

    with Image.open(output) as image:
        assert image.size == (30, 30)
    assert [p.name for p in tmp_path.iterdir() if p.name.startswith(".")] == []


def test_render_solid_background(tmp_path) -> None:
    output = tmp_path / "assets" / "background.jpg"

    render_solid_background(str(output), ImageSize(width=64, height=36), (10, 10, 10))

    with Image.open(output) as image:
        assert image.size == (64, 36)
