"""
Base repository with common SQLite connection handling.
"""

import logging
import sqlite3
import threading
from abc import ABC
from contextlib import contextmanager

from infrastructure.schema_manager import SchemaManager

logger = logging.getLogger("snake_teams.repositories")


class BaseRepository(ABC):
    """
    Base class for SQLite-backed stores.

    Makes sure the schema exists once per database file and hands out
    short-lived connections. Every public operation opens and closes its own
    connection, so instances are safe to share between threads.
    """

    # DB paths whose schema is known to be current in this process
    _schema_initialized_paths: set[str] = set()
    _schema_lock = threading.Lock()

    def __init__(self, db_path: str, busy_timeout_ms: int = 5000):
        """
        Args:
            db_path: Path to SQLite database file
            busy_timeout_ms: How long a writer waits for a competing lock

        A database that cannot be opened or migrated is logged and left for
        the first read or write to report, so the process still starts.
        """
        self.db_path = db_path
        self.busy_timeout_ms = busy_timeout_ms
        try:
            self._ensure_schema()
        except sqlite3.Error as exc:
            logger.error(f"Duty store {db_path} unavailable: {exc}")

    def _ensure_schema(self) -> None:
        with BaseRepository._schema_lock:
            if self.db_path in BaseRepository._schema_initialized_paths:
                return
            SchemaManager(self.db_path).initialize()
            BaseRepository._schema_initialized_paths.add(self.db_path)
            logger.debug(f"Schema ready for {self.db_path}")

    def get_connection(self) -> sqlite3.Connection:
        """Open a connection with row access by column name."""
        self._ensure_schema()
        conn = sqlite3.connect(self.db_path)
        try:
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute(f"PRAGMA busy_timeout={int(self.busy_timeout_ms)}")
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    @contextmanager
    def _transaction(self, begin: str | None):
        conn = self.get_connection()
        try:
            if begin:
                conn.execute(begin)
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def connection(self):
        """
        Context manager for a plain connection.

        Commits on success, rolls back on exception, always closes.
        """
        return self._transaction(None)

    def atomic_transaction(self):
        """
        Context manager holding the database write lock for its whole body.

        BEGIN IMMEDIATE takes the lock up front, so a read-modify-write of the
        duty record cannot interleave with another process writing the same
        file.
        """
        return self._transaction("BEGIN IMMEDIATE")
