"""Database helpers for thumbnail records."""

from db.thumbnails import ThumbnailStore

__all__ = ["ThumbnailStore"]
