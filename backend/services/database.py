"""Database service for the cadence API sidecar.

SQLite storage for the track catalog, playlists and player settings.
"""

import json
import sqlite3
import uuid
from collections.abc import Generator
from config import DEFAULT_SETTINGS
from contextlib import contextmanager
from core.logging import db_logger, log_database_operation
from eliot import start_action
from pathlib import Path
from typing import Any

DB_TABLES = {
    "tracks": """
        CREATE TABLE IF NOT EXISTS tracks
        (id TEXT PRIMARY KEY,
         title TEXT NOT NULL,
         artist TEXT,
         album TEXT,
         duration INTEGER DEFAULT 0 CHECK (duration >= 0),
         uri TEXT NOT NULL,
         cover_uri TEXT,
         genre TEXT,
         source TEXT NOT NULL DEFAULT 'catalog' CHECK (source IN ('catalog', 'upload')),
         play_count INTEGER DEFAULT 0,
         added_date TIMESTAMP DEFAULT CURRENT_TIMESTAMP)
    """,
    "settings": """
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT
        )
    """,
    "playlists": """
        CREATE TABLE IF NOT EXISTS playlists (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            description TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """,
    "playlist_items": """
        CREATE TABLE IF NOT EXISTS playlist_items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            playlist_id INTEGER NOT NULL,
            track_id TEXT NOT NULL,
            position INTEGER NOT NULL,
            added_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(playlist_id, track_id),
            FOREIGN KEY (playlist_id) REFERENCES playlists(id) ON DELETE CASCADE,
            FOREIGN KEY (track_id) REFERENCES tracks(id) ON DELETE CASCADE
        )
    """,
}

TRACK_COLUMNS = "id, title, artist, album, duration, uri, cover_uri, genre, source, play_count, added_date"


class DatabaseService:
    """Database service for FastAPI.

    Opens a short-lived connection per operation.
    """

    def __init__(self, db_path: str | Path):
        """Initialize the database service.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _ensure_tables(self) -> None:
        """Create database tables if they don't exist."""
        with start_action(db_logger, "ensure_tables", db_path=str(self.db_path)), self.get_connection() as conn:
            cursor = conn.cursor()
            for table_sql in DB_TABLES.values():
                cursor.execute(table_sql)
            conn.commit()

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with automatic cleanup.

        Yields:
            SQLite connection that will be automatically closed
        """
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        # Enable foreign key constraints for CASCADE behavior
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    # ==================== Track Operations ====================

    def get_all_tracks(
        self,
        search: str | None = None,
        source: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[dict[str, Any]], int]:
        """Get tracks from the catalog with filtering and pagination.

        Returns:
            Tuple of (tracks list, total count)
        """
        with self.get_connection() as conn:
            cursor = conn.cursor()

            conditions = []
            params: list[Any] = []

            if search:
                conditions.append("(title LIKE ? OR artist LIKE ? OR album LIKE ?)")
                search_term = f"%{search}%"
                params.extend([search_term, search_term, search_term])

            if source:
                conditions.append("source = ?")
                params.append(source)

            where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

            cursor.execute(f"SELECT COUNT(*) FROM tracks {where_clause}", params)
            total = cursor.fetchone()[0]

            cursor.execute(
                f"""
                SELECT {TRACK_COLUMNS}
                FROM tracks
                {where_clause}
                ORDER BY added_date DESC, title ASC
                LIMIT ? OFFSET ?
            """,
                params + [limit, offset],
            )
            return [dict(row) for row in cursor.fetchall()], total

    def get_track_by_id(self, track_id: str) -> dict[str, Any] | None:
        """Get a single track by ID."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {TRACK_COLUMNS} FROM tracks WHERE id = ?", (track_id,))
            row = cursor.fetchone()
            return dict(row) if row else None

    def get_tracks_by_ids(self, track_ids: list[str]) -> list[dict[str, Any]]:
        """Get tracks in the order of ``track_ids``, skipping unknown ids."""
        if not track_ids:
            return []
        with self.get_connection() as conn:
            cursor = conn.cursor()
            placeholders = ",".join("?" * len(track_ids))
            cursor.execute(f"SELECT {TRACK_COLUMNS} FROM tracks WHERE id IN ({placeholders})", track_ids)
            by_id = {row["id"]: dict(row) for row in cursor.fetchall()}
        return [by_id[track_id] for track_id in track_ids if track_id in by_id]

    def add_track(self, data: dict[str, Any]) -> dict[str, Any] | None:
        """Add a track to the catalog.

        Returns:
            The stored track, or None if the id already exists
        """
        track_id = data.get("id") or uuid.uuid4().hex
        with self.get_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO tracks (id, title, artist, album, duration, uri, cover_uri, genre, source)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                    (
                        track_id,
                        data["title"],
                        data.get("artist"),
                        data.get("album"),
                        data.get("duration") or 0,
                        data["uri"],
                        data.get("cover_uri"),
                        data.get("genre"),
                        data.get("source") or "catalog",
                    ),
                )
                conn.commit()
            except sqlite3.IntegrityError:
                return None

        log_database_operation("INSERT", table="tracks", track_id=track_id)
        return self.get_track_by_id(track_id)

    def delete_track(self, track_id: str) -> bool:
        """Delete a track; playlist entries go with it."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM tracks WHERE id = ?", (track_id,))
            conn.commit()
            return cursor.rowcount > 0

    def increment_play_count(self, track_id: str) -> None:
        with self.get_connection() as conn:
            conn.execute("UPDATE tracks SET play_count = play_count + 1 WHERE id = ?", (track_id,))
            conn.commit()

    # ==================== Playlist Operations ====================

    def get_playlists(self) -> list[dict[str, Any]]:
        """Get all playlists with track counts."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT p.id, p.name, p.description, p.created_at,
                       COUNT(pi.id) as track_count
                FROM playlists p
                LEFT JOIN playlist_items pi ON p.id = pi.playlist_id
                GROUP BY p.id
                ORDER BY p.created_at ASC, p.id ASC
            """
            )
            return [dict(row) for row in cursor.fetchall()]

    def create_playlist(self, name: str, description: str | None = None) -> dict[str, Any] | None:
        """Create a new playlist.

        Returns:
            The playlist, or None if the name is taken
        """
        with self.get_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("INSERT INTO playlists (name, description) VALUES (?, ?)", (name, description))
                conn.commit()
            except sqlite3.IntegrityError:
                return None
            playlist_id = cursor.lastrowid

            cursor.execute("SELECT * FROM playlists WHERE id = ?", (playlist_id,))
            result = dict(cursor.fetchone())
            result["track_count"] = 0
            return result

    def get_playlist(self, playlist_id: int) -> dict[str, Any] | None:
        """Get a playlist with its tracks in position order."""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("SELECT * FROM playlists WHERE id = ?", (playlist_id,))
            playlist_row = cursor.fetchone()
            if not playlist_row:
                return None

            playlist = dict(playlist_row)

            cursor.execute(
                """
                SELECT t.id, t.title, t.artist, t.album, t.duration, t.uri,
                       t.cover_uri, t.genre, t.source, t.play_count, t.added_date
                FROM playlist_items pi
                JOIN tracks t ON pi.track_id = t.id
                WHERE pi.playlist_id = ?
                ORDER BY pi.position ASC
            """,
                (playlist_id,),
            )
            playlist["tracks"] = [dict(row) for row in cursor.fetchall()]
            playlist["track_count"] = len(playlist["tracks"])
            return playlist

    def update_playlist(
        self, playlist_id: int, name: str | None = None, description: str | None = None
    ) -> dict[str, Any] | None:
        """Rename a playlist and/or change its description.

        Returns:
            The updated playlist, or None if it doesn't exist or the name is taken
        """
        with self.get_connection() as conn:
            cursor = conn.cursor()

            try:
                if name:
                    cursor.execute("UPDATE playlists SET name = ? WHERE id = ?", (name, playlist_id))
                if description is not None:
                    cursor.execute("UPDATE playlists SET description = ? WHERE id = ?", (description, playlist_id))
                conn.commit()
            except sqlite3.IntegrityError:
                return None  # Name conflict

        log_database_operation("UPDATE", table="playlists", playlist_id=playlist_id)
        playlist = self.get_playlist(playlist_id)
        if playlist:
            del playlist["tracks"]
        return playlist

    def delete_playlist(self, playlist_id: int) -> bool:
        """Delete a playlist."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM playlists WHERE id = ?", (playlist_id,))
            conn.commit()
            return cursor.rowcount > 0

    def add_tracks_to_playlist(self, playlist_id: int, track_ids: list[str]) -> int:
        """Append tracks to a playlist.

        Duplicates and unknown track ids are skipped.

        Returns:
            Number of tracks added
        """
        with self.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("SELECT COALESCE(MAX(position), -1) FROM playlist_items WHERE playlist_id = ?", (playlist_id,))
            max_position = cursor.fetchone()[0]

            added = 0
            for track_id in track_ids:
                try:
                    cursor.execute(
                        "INSERT INTO playlist_items (playlist_id, track_id, position) VALUES (?, ?, ?)",
                        (playlist_id, track_id, max_position + 1),
                    )
                    max_position += 1
                    added += 1
                except sqlite3.IntegrityError:
                    continue

            conn.commit()
            return added

    def remove_track_from_playlist(self, playlist_id: int, track_id: str) -> bool:
        """Remove a track from a playlist and close the gap in positions."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM playlist_items WHERE playlist_id = ? AND track_id = ?",
                (playlist_id, track_id),
            )
            if cursor.rowcount == 0:
                return False

            # Reindex positions
            cursor.execute(
                "SELECT id FROM playlist_items WHERE playlist_id = ? ORDER BY position",
                (playlist_id,),
            )
            for new_pos, item in enumerate(cursor.fetchall()):
                cursor.execute("UPDATE playlist_items SET position = ? WHERE id = ?", (new_pos, item["id"]))

            conn.commit()
            return True

    # ==================== Settings Operations ====================

    def get_all_settings(self) -> dict[str, Any]:
        """Get all settings, filling in defaults for missing keys."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT key, value FROM settings")
            stored = {row["key"]: json.loads(row["value"]) for row in cursor.fetchall()}
        return {**DEFAULT_SETTINGS, **stored}

    def get_setting(self, key: str) -> Any | None:
        """Get a single setting (stored value or default)."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
            row = cursor.fetchone()
        if row:
            return json.loads(row["value"])
        return DEFAULT_SETTINGS.get(key)

    def set_setting(self, key: str, value: Any) -> None:
        """Set a single setting."""
        with self.get_connection() as conn:
            conn.execute("INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)", (key, json.dumps(value)))
            conn.commit()

    def update_settings(self, settings: dict[str, Any]) -> list[str]:
        """Update multiple settings.

        Returns:
            Keys that were written
        """
        updated = []
        for key, value in settings.items():
            if value is not None:
                self.set_setting(key, value)
                updated.append(key)
        return updated


# Global database instance (initialized in main.py)
_db: DatabaseService | None = None


def init_db(db_path: str | Path) -> DatabaseService:
    """Initialize the global database instance."""
    global _db
    _db = DatabaseService(db_path)
    return _db


def get_db() -> DatabaseService:
    """Get the global database instance."""
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _db
