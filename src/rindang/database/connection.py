"""SQLite connection management for the offline cache database."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path


class DatabaseConnection:
    """Opens short-lived SQLite connections to the offline cache file.

    The cache is written by the sync coordinator while the backup script or
    a report may be reading it, so each call opens its own connection and
    waits up to ``timeout`` seconds for a competing writer to finish.
    """

    def __init__(self, db_path: str | Path, timeout: float = 5.0):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.timeout = timeout

    @contextmanager
    def get_connection(self):
        """Yield a connection that commits on success, rolls back on error.

        Rows come back as ``sqlite3.Row`` so callers index columns by name.
        """
        conn = sqlite3.connect(str(self.db_path), timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def execute(self, sql: str, params: tuple = ()):
        """Run one read against the cache and return its rows.

        Used for the queue and cache lookups; writes that must be atomic
        with a read go through ``get_connection`` instead.
        """
        with self.get_connection() as conn:
            cursor = conn.execute(sql, params)
            return cursor.fetchall()
