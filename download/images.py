"""Remote image download."""

from __future__ import annotations

import logging
import os
import tempfile

import requests

from config.settings import DOWNLOAD_MAX_BYTES, DOWNLOAD_TIMEOUT_SECONDS
from media.images import process_image
from thumbnails.errors import FetchError, ImageProcessingError
from thumbnails.types import ImageSize

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


def _fetch_to_file(url: str, destination: str, timeout: float) -> None:
    try:
        resp = requests.get(url, timeout=timeout, stream=True)
    except requests.RequestException as exc:
        raise FetchError(f"Image download failed for {url}: {exc}") from exc

    with resp:
        if not resp.ok:
            raise FetchError(f"Image download failed for {url}: HTTP {resp.status_code}")
        received = 0
        try:
            with open(destination, "wb") as handle:
                for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                    if not chunk:
                        continue
                    received += len(chunk)
                    if received > DOWNLOAD_MAX_BYTES:
                        raise FetchError(f"Image at {url} exceeds {DOWNLOAD_MAX_BYTES} bytes")
                    handle.write(chunk)
        except requests.RequestException as exc:
            raise FetchError(f"Image download interrupted for {url}: {exc}") from exc
    if received == 0:
        raise FetchError(f"Image download returned an empty body for {url}")


def download_image(
    url: str,
    folder: str,
    filename: str,
    size: ImageSize,
    timeout: float = DOWNLOAD_TIMEOUT_SECONDS,
) -> ImageSize:
    """Download ``url`` and write it resized to ``size`` at ``folder/filename``.

    The payload is staged in a temporary file next to the destination, then
    resized into place, so a failed download never clobbers an existing file.

    Raises:
        FetchError: On network failure, non-2xx response, oversized or invalid payload.
    """
    target = str(url or "").strip()
    if not target:
        raise FetchError("download url is required")

    os.makedirs(folder, exist_ok=True)
    fd, pending_path = tempfile.mkstemp(prefix=".download-", suffix=".img", dir=folder)
    os.close(fd)
    try:
        _fetch_to_file(target, pending_path, timeout)
        try:
            written = process_image(pending_path, os.path.join(folder, filename), size, keep_original=False)
        except ImageProcessingError as exc:
            raise FetchError(f"Invalid image payload from {target}: {exc}") from exc
    finally:
        if os.path.exists(pending_path):
            os.remove(pending_path)

    logger.info("Downloaded image %s -> %s", target, os.path.join(folder, filename))
    return written
