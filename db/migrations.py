"""SQLite migrations for thumbnail storage."""

from __future__ import annotations

import sqlite3


def ensure_thumbnail_tables(conn: sqlite3.Connection) -> None:
    """Ensure the thumbnails table and its indexes exist.

    A video holds at most one record per type and a playlist at most one
    record; the unique indexes enforce it.
    """
    cur = conn.cursor()
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS thumbnails (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            filename TEXT NOT NULL,
            type INTEGER NOT NULL,
            width INTEGER,
            height INTEGER,
            file_url TEXT,
            automatically_generated INTEGER,
            video_id TEXT,
            video_playlist_id TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            CHECK ((video_id IS NULL) != (video_playlist_id IS NULL))
        )
        """
    )
    cur.execute(
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_thumbnails_video_type "
        "ON thumbnails (video_id, type) WHERE video_id IS NOT NULL"
    )
    cur.execute(
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_thumbnails_playlist "
        "ON thumbnails (video_playlist_id) WHERE video_playlist_id IS NOT NULL"
    )
    cur.execute(
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_thumbnails_type_filename "
        "ON thumbnails (type, filename)"
    )
    conn.commit()
