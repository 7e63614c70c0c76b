"""Wrapper utilities for retrieving media information using ffprobe."""

from __future__ import annotations

import json
import subprocess
from typing import Any


def _probe(file_path: str, *sections: str) -> dict[str, Any]:
    command = [
        "ffprobe",
        "-v",
        "error",
        "-print_format",
        "json",
        *sections,
        file_path,
    ]

    try:
        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            check=True,
            timeout=15,
        )
    except FileNotFoundError as exc:
        raise RuntimeError("ffprobe is not installed or not available in PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise RuntimeError(f"ffprobe timed out while probing: {file_path}") from exc
    except subprocess.CalledProcessError as exc:
        stderr_text = (exc.stderr or "").strip()
        raise RuntimeError(f"ffprobe failed for {file_path}: {stderr_text or exc}") from exc

    try:
        return json.loads(completed.stdout or "{}")
    except json.JSONDecodeError as exc:
        raise ValueError(f"ffprobe returned invalid JSON for {file_path}") from exc


def get_media_duration(file_path: str) -> float:
    """Return media duration in seconds using ``ffprobe`` JSON output.

    Raises:
        RuntimeError: If ``ffprobe`` execution fails or the command is missing.
        ValueError: If duration data is missing or not parseable as a float.
    """
    payload = _probe(file_path, "-show_format")

    duration_value = (payload.get("format") or {}).get("duration")
    if duration_value in (None, ""):
        raise ValueError(f"ffprobe did not return a duration for {file_path}")

    try:
        return float(duration_value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"ffprobe returned a non-numeric duration for {file_path}") from exc


def get_video_resolution(file_path: str) -> int:
    """Return the height of the first video stream, or 0 for audio-only media.

    Embedded cover art does not count as a video stream.
    """
    payload = _probe(file_path, "-show_streams")
    for stream in payload.get("streams") or []:
        if stream.get("codec_type") != "video":
            continue
        # Embedded cover art shows up as a single-frame "attached picture" stream.
        if (stream.get("disposition") or {}).get("attached_pic"):
            continue
        try:
            return int(stream.get("height") or 0)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"ffprobe returned a non-numeric height for {file_path}") from exc
    return 0
