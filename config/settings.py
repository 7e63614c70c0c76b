"""Application settings constants."""

from __future__ import annotations

from thumbnails.types import ImageSize

# Default target size for miniatures (listings, playlist covers).
THUMBNAILS_SIZE = ImageSize(width=280, height=157)

# Default target size for previews (video detail view).
PREVIEWS_SIZE = ImageSize(width=850, height=480)

JPEG_QUALITY = 85

# Remote image fetch limits.
DOWNLOAD_TIMEOUT_SECONDS = 10
DOWNLOAD_MAX_BYTES = 10 * 1024 * 1024

FFMPEG_TIMEOUT_SECONDS = 60

# Position of the representative frame, as a fraction of the media duration.
FRAME_SEEK_RATIO = 0.5

# Fill colour of the generated audio-only background.
DEFAULT_AUDIO_BACKGROUND_COLOR = (32, 32, 32)
