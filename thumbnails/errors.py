"""Error taxonomy for thumbnail generation."""

from __future__ import annotations


class ThumbnailError(Exception):
    """Base class of every error raised while producing or storing a thumbnail."""


class ConfigurationError(ThumbnailError):
    """Raised before any I/O when a thumbnail type is not supported by the entity."""


class ImageProcessingError(ThumbnailError):
    """Raised when an image cannot be read, resized or written."""


class MediaProcessingError(ThumbnailError):
    """Raised when a frame cannot be probed or extracted from a media file."""


class FetchError(ThumbnailError):
    """Raised on network failure, non-2xx response or invalid remote payload."""


class PersistenceError(ThumbnailError):
    """Raised when a thumbnail record cannot be committed or removed."""
