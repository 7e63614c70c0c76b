"""Persistence helpers for thumbnail records."""

from __future__ import annotations

import logging
import os
import sqlite3
from datetime import datetime, timezone
from typing import Any

from db.migrations import ensure_thumbnail_tables
from engine.paths import StoragePaths
from thumbnails.errors import PersistenceError
from thumbnails.types import Thumbnail, ThumbnailType

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _row_to_thumbnail(row: sqlite3.Row) -> Thumbnail:
    automatically_generated = row["automatically_generated"]
    return Thumbnail(
        id=int(row["id"]),
        filename=row["filename"],
        type=ThumbnailType(int(row["type"])),
        width=row["width"],
        height=row["height"],
        file_url=row["file_url"],
        automatically_generated=None if automatically_generated is None else bool(automatically_generated),
        video_id=row["video_id"],
        video_playlist_id=row["video_playlist_id"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _remove_file(path: str | None) -> bool:
    if not path:
        return False
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    logger.info("Removed thumbnail file %s", path)
    return True


class ThumbnailStore:
    """SQLite-backed store of thumbnail records.

    The store owns the commit boundary of a generation: ``save`` persists the
    record and, only after the commit, removes the file a rename superseded.
    """

    def __init__(self, db_path: str, paths: StoragePaths) -> None:
        self.db_path = db_path
        self.paths = paths

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.db_path, check_same_thread=False, timeout=30)
            conn.row_factory = sqlite3.Row
            ensure_thumbnail_tables(conn)
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot open thumbnail database {self.db_path}: {exc}") from exc
        return conn

    def ensure_schema(self) -> None:
        """Ensure thumbnail schema exists."""
        conn = self._connect()
        conn.close()

    def save(self, thumbnail: Thumbnail) -> Thumbnail:
        """Insert or update ``thumbnail`` and clean up its superseded file.

        Raises:
            PersistenceError: If the record is incomplete or the commit fails.
                The superseded file is kept in that case.
        """
        if not thumbnail.filename or thumbnail.type is None:
            raise PersistenceError("thumbnail filename and type are required")
        if bool(thumbnail.video_id) == bool(thumbnail.video_playlist_id):
            raise PersistenceError("thumbnail must belong to exactly one video or playlist")

        now = _utcnow()
        values: dict[str, Any] = {
            "filename": thumbnail.filename,
            "type": thumbnail.type.value,
            "width": thumbnail.width,
            "height": thumbnail.height,
            "file_url": thumbnail.file_url,
            "automatically_generated": (
                None if thumbnail.automatically_generated is None else int(thumbnail.automatically_generated)
            ),
            "video_id": thumbnail.video_id,
            "video_playlist_id": thumbnail.video_playlist_id,
            "updated_at": now.isoformat(),
        }

        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN IMMEDIATE")
            if thumbnail.id is None:
                values["created_at"] = now.isoformat()
                columns = ", ".join(values)
                placeholders = ", ".join("?" for _ in values)
                cur.execute(
                    f"INSERT INTO thumbnails ({columns}) VALUES ({placeholders})",
                    tuple(values.values()),
                )
                row_id = int(cur.lastrowid)
            else:
                assignments = ", ".join(f"{column}=?" for column in values)
                cur.execute(
                    f"UPDATE thumbnails SET {assignments} WHERE id=?",
                    (*values.values(), thumbnail.id),
                )
                if cur.rowcount != 1:
                    raise PersistenceError(f"thumbnail {thumbnail.id} does not exist")
                row_id = thumbnail.id
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise PersistenceError(f"Cannot save thumbnail {thumbnail.filename}: {exc}") from exc
        except PersistenceError:
            conn.rollback()
            raise
        finally:
            conn.close()

        if thumbnail.id is None:
            thumbnail.id = row_id
            thumbnail.created_at = now
        thumbnail.updated_at = now

        previous_path = thumbnail.get_previous_file_path(self.paths)
        if previous_path:
            _remove_file(previous_path)
            thumbnail.consume_previous_filename()
        return thumbnail

    def _load(self, column: str, owner_uuid: str) -> list[Thumbnail]:
        uuid = (owner_uuid or "").strip()
        if not uuid:
            return []
        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute(
                f"SELECT * FROM thumbnails WHERE {column}=? ORDER BY type ASC",
                (uuid,),
            )
            return [_row_to_thumbnail(row) for row in cur.fetchall()]
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot load thumbnails for {uuid}: {exc}") from exc
        finally:
            conn.close()

    def load_for_video(self, video_uuid: str) -> list[Thumbnail]:
        """Return the records attached to a video, miniature first."""
        return self._load("video_id", video_uuid)

    def load_for_playlist(self, playlist_uuid: str) -> Thumbnail | None:
        rows = self._load("video_playlist_id", playlist_uuid)
        return rows[0] if rows else None

    def delete(self, thumbnail: Thumbnail) -> None:
        """Delete the record and its local file."""
        if thumbnail.id is not None:
            conn = self._connect()
            try:
                conn.execute("DELETE FROM thumbnails WHERE id=?", (thumbnail.id,))
                conn.commit()
            except sqlite3.Error as exc:
                raise PersistenceError(f"Cannot delete thumbnail {thumbnail.id}: {exc}") from exc
            finally:
                conn.close()
        if thumbnail.filename and thumbnail.type is not None:
            _remove_file(thumbnail.get_file_path(self.paths))
        thumbnail.id = None
