"""Image resize helpers backed by Pillow."""

from __future__ import annotations

import logging
import os
import tempfile

from PIL import Image, ImageOps, UnidentifiedImageError

from config.settings import JPEG_QUALITY
from thumbnails.errors import ImageProcessingError
from thumbnails.types import ImageSize

logger = logging.getLogger(__name__)


def _atomic_save(image: Image.Image, output_path: str) -> None:
    folder = os.path.dirname(os.path.abspath(output_path))
    os.makedirs(folder, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=".", suffix=".tmp.jpg", dir=folder)
    try:
        with os.fdopen(fd, "wb") as handle:
            image.save(handle, format="JPEG", quality=JPEG_QUALITY)
        os.replace(tmp_path, output_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def process_image(input_path: str, output_path: str, size: ImageSize, keep_original: bool = False) -> ImageSize:
    """Resize ``input_path`` to exactly ``size`` and write a JPEG at ``output_path``.

    The image is scaled to cover the target box and center-cropped, so the
    written file always has the requested dimensions. The output replaces any
    previous file atomically. Unless ``keep_original`` is set, the input file
    is removed once the output is in place.

    Returns:
        The size of the written image.

    Raises:
        ImageProcessingError: If the input is missing, unreadable or not an image,
            or the output cannot be written.
    """
    try:
        with Image.open(input_path) as source:
            source.load()
            image = ImageOps.exif_transpose(source).convert("RGB")
    except (FileNotFoundError, UnidentifiedImageError, OSError) as exc:
        raise ImageProcessingError(f"Cannot read image {input_path}: {exc}") from exc

    resized = ImageOps.fit(image, (size.width, size.height), method=Image.Resampling.LANCZOS)
    try:
        _atomic_save(resized, output_path)
    except OSError as exc:
        raise ImageProcessingError(f"Cannot write image {output_path}: {exc}") from exc

    if not keep_original and os.path.abspath(input_path) != os.path.abspath(output_path):
        try:
            os.remove(input_path)
        except FileNotFoundError:
            pass

    logger.debug("Processed image %s -> %s (%dx%d)", input_path, output_path, size.width, size.height)
    return ImageSize(width=resized.width, height=resized.height)


def render_solid_background(output_path: str, size: ImageSize, color: tuple[int, int, int]) -> None:
    """Write a solid-colour JPEG of ``size`` at ``output_path``."""
    image = Image.new("RGB", (size.width, size.height), color)
    try:
        _atomic_save(image, output_path)
    except OSError as exc:
        raise ImageProcessingError(f"Cannot write image {output_path}: {exc}") from exc
