"""SQLite implementation of the video store."""

import logging
import sqlite3
import threading
from collections.abc import Sequence

from devbytes.config import settings
from devbytes.storage.base import DatabaseVideo, StorageError, VideoStore
from devbytes.storage.live import LiveData

logger = logging.getLogger(__name__)


class SQLiteVideoStore(VideoStore):
    """SQLite-backed video cache.

    Implements VideoStore using stdlib sqlite3. Writes are serialized by a
    lock and applied in a single transaction; after each commit the full
    table is re-read and posted to the live view. Readers only ever see
    those published snapshots, never the connection itself.
    """

    _CREATE_TABLE = """
        CREATE TABLE IF NOT EXISTS videos (
            url          TEXT PRIMARY KEY,
            updated      TEXT NOT NULL,
            title        TEXT NOT NULL,
            description  TEXT NOT NULL,
            thumbnail    TEXT NOT NULL
        )
    """

    _UPSERT = """
        INSERT INTO videos (url, updated, title, description, thumbnail)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(url) DO UPDATE SET
            updated = excluded.updated,
            title = excluded.title,
            description = excluded.description,
            thumbnail = excluded.thumbnail
    """

    def __init__(self, db_path: str | None = None) -> None:
        """Open (and create if needed) the video database.

        Args:
            db_path: Path to SQLite database file. Defaults to settings.db_path.
                     Use ":memory:" for testing.

        Raises:
            StorageError: If the database cannot be opened or initialised.
        """
        self._db_path = db_path or str(settings.db_path)
        self._write_lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._init_db()
            videos = self._query_all()
        except sqlite3.Error as e:
            raise StorageError(f"Could not open video database at {self._db_path}: {e}") from e
        self._videos = LiveData(videos)
        logger.debug("Opened video store at %s with %d cached videos", self._db_path, len(videos))

    @property
    def db_path(self) -> str:
        return self._db_path

    def _init_db(self) -> None:
        """Create tables if they don't exist."""
        self._conn.execute(self._CREATE_TABLE)
        self._conn.commit()

    def upsert_all(self, videos: Sequence[DatabaseVideo]) -> None:
        rows = [
            (video.url, video.updated, video.title, video.description, video.thumbnail)
            for video in videos
        ]
        if not rows:
            return

        with self._write_lock:
            try:
                # commits on success; any error, including reading back the
                # new set, rolls the whole batch back
                with self._conn:
                    self._conn.executemany(self._UPSERT, rows)
                    snapshot = self._query_all()
            except sqlite3.Error as e:
                raise StorageError(f"Failed to write {len(rows)} videos: {e}") from e
            self._videos.post(snapshot)

        logger.info("Upserted %d videos; %d cached in total", len(rows), len(snapshot))

    def observe_all(self) -> LiveData[list[DatabaseVideo]]:
        return self._videos

    def _query_all(self) -> list[DatabaseVideo]:
        sql = "SELECT url, updated, title, description, thumbnail FROM videos ORDER BY rowid"
        rows = self._conn.execute(sql).fetchall()
        return [self._row_to_video(row) for row in rows]

    @staticmethod
    def _row_to_video(row: sqlite3.Row) -> DatabaseVideo:
        return DatabaseVideo(
            url=row["url"],
            updated=row["updated"],
            title=row["title"],
            description=row["description"],
            thumbnail=row["thumbnail"],
        )


_instance: SQLiteVideoStore | None = None
_instance_lock = threading.Lock()


def get_database(db_path: str | None = None) -> SQLiteVideoStore:
    """Return the process-wide video store, opening it on first use.

    Only the first call's ``db_path`` matters; later calls get the same
    instance. A failed first open raises StorageError and leaves nothing
    behind, so the next call tries again.
    """
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = SQLiteVideoStore(db_path)
        return _instance
