"""Representative frame extraction through ffmpeg."""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile

from config.settings import FFMPEG_TIMEOUT_SECONDS, FRAME_SEEK_RATIO
from media.ffprobe import get_media_duration
from media.images import process_image
from thumbnails.errors import ImageProcessingError, MediaProcessingError
from thumbnails.types import ImageSize

logger = logging.getLogger(__name__)


def _seek_position(input_path: str) -> float:
    try:
        duration = get_media_duration(input_path)
    except (RuntimeError, ValueError) as exc:
        raise MediaProcessingError(str(exc)) from exc
    return max(duration * FRAME_SEEK_RATIO, 0.0)


def _run_ffmpeg(command: list[str], input_path: str) -> None:
    try:
        subprocess.run(
            command,
            capture_output=True,
            text=True,
            check=True,
            timeout=FFMPEG_TIMEOUT_SECONDS,
        )
    except FileNotFoundError as exc:
        raise MediaProcessingError("ffmpeg is not installed or not available in PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise MediaProcessingError(f"ffmpeg timed out while extracting a frame from {input_path}") from exc
    except subprocess.CalledProcessError as exc:
        stderr_text = (exc.stderr or "").strip()
        raise MediaProcessingError(f"ffmpeg failed for {input_path}: {stderr_text or exc}") from exc


def generate_image_from_video_file(input_path: str, folder: str, filename: str, size: ImageSize) -> ImageSize:
    """Extract one representative frame of ``input_path`` into ``folder/filename``.

    The frame is taken at ``FRAME_SEEK_RATIO`` of the media duration, written
    to a temporary file and resized into place.

    Raises:
        MediaProcessingError: If probing, extraction or resizing fails.
    """
    seek = _seek_position(input_path)
    os.makedirs(folder, exist_ok=True)
    fd, pending_path = tempfile.mkstemp(prefix=".frame-", suffix=".jpg", dir=folder)
    os.close(fd)

    command = [
        "ffmpeg",
        "-v",
        "error",
        "-y",
        "-ss",
        f"{seek:.3f}",
        "-i",
        input_path,
        "-frames:v",
        "1",
        pending_path,
    ]
    try:
        _run_ffmpeg(command, input_path)
        if os.path.getsize(pending_path) == 0:
            raise MediaProcessingError(f"ffmpeg produced no frame for {input_path}")
        output_path = os.path.join(folder, filename)
        try:
            return process_image(pending_path, output_path, size, keep_original=False)
        except ImageProcessingError as exc:
            raise MediaProcessingError(f"Cannot resize frame of {input_path}: {exc}") from exc
    finally:
        if os.path.exists(pending_path):
            os.remove(pending_path)
            logger.debug("Removed pending frame %s", pending_path)
