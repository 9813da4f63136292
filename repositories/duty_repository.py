"""
SQLite repository for duty rotation counts.
"""

import logging
import sqlite3

from domain.models.duty import DutyRecord
from repositories.base_repository import BaseRepository
from repositories.interfaces import DutyStoreError, IDutyRepository

logger = logging.getLogger("snake_teams.repositories.duty")


class DutyRepository(BaseRepository, IDutyRepository):
    """
    Stores duty counts in SQLite.

    Counts live one row per normalized key in duty_counts; the last assignee
    lives in the single-row duty_state table.
    """

    def load(self) -> DutyRecord:
        try:
            with self.connection() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT duty_key, count FROM duty_counts")
                counts = {row["duty_key"]: int(row["count"]) for row in cursor.fetchall()}
                cursor.execute("SELECT last_assignee_key FROM duty_state WHERE id = 1")
                row = cursor.fetchone()
        except sqlite3.Error as exc:
            raise DutyStoreError(f"Failed to read duty store {self.db_path}: {exc}") from exc

        last_key = row["last_assignee_key"] if row else None
        return DutyRecord(counts=counts, last_assignee_key=last_key)

    def save(self, record: DutyRecord) -> None:
        try:
            with self.atomic_transaction() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM duty_counts")
                cursor.executemany(
                    "INSERT INTO duty_counts (duty_key, count) VALUES (?, ?)",
                    [(key, count) for key, count in record.counts.items()],
                )
                cursor.execute(
                    """
                    INSERT INTO duty_state (id, last_assignee_key) VALUES (1, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        last_assignee_key = excluded.last_assignee_key,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (record.last_assignee_key,),
                )
        except sqlite3.Error as exc:
            raise DutyStoreError(f"Failed to write duty store {self.db_path}: {exc}") from exc
        logger.debug(f"Saved duty record with {len(record.counts)} keys to {self.db_path}")
