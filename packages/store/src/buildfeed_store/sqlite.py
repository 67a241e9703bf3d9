"""SQLiteStore: local file-based author directory.

Useful on a long-lived build agent where the mapping is maintained with
`buildfeed authors add` rather than committed to the repository.

Schema:
  authors: one row per member; ``id`` preserves insertion order so the
            directory is rebuilt in the order entries were first added.
"""

from __future__ import annotations

import logging
import sqlite3

from buildfeed_store.base import BaseStore, StoreError
from buildfeed_store.models import AuthorEntry

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS authors (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    member_name  TEXT NOT NULL UNIQUE,
    handle       TEXT NOT NULL
);
"""


class SQLiteStore(BaseStore):
    """Stores the author directory in a local SQLite database file.

    The database file path defaults to `.buildfeed.db` in the current working
    directory. Configure via .buildfeed.yml: `store_path: /path/to/buildfeed.db`.
    """

    def __init__(self, db_path: str = ".buildfeed.db"):
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def save(self, entry: AuthorEntry) -> None:
        # ON CONFLICT keeps the original row id, so the member keeps its position.
        try:
            self._conn.execute(
                """
                INSERT INTO authors (member_name, handle) VALUES (?, ?)
                ON CONFLICT (member_name) DO UPDATE SET handle = excluded.handle
                """,
                (entry.member_name, entry.handle),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Could not save author mapping: {e}") from e

    def remove(self, member_name: str) -> bool:
        try:
            cursor = self._conn.execute("DELETE FROM authors WHERE member_name=?", (member_name,))
            self._conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Could not remove author mapping: {e}") from e
        return cursor.rowcount > 0

    def list_authors(self) -> list[AuthorEntry]:
        try:
            rows = self._conn.execute("SELECT member_name, handle FROM authors ORDER BY id").fetchall()
        except sqlite3.Error as e:
            logger.warning("SQLiteStore.list_authors() failed: %s", e)
            return []
        return [AuthorEntry(member_name=r["member_name"], handle=r["handle"]) for r in rows]

    def close(self) -> None:
        self._conn.close()
