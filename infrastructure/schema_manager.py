"""
Schema and migration management for the duty store database.
"""

import logging
import sqlite3
from contextlib import closing

logger = logging.getLogger("snake_teams.schema")


class SchemaManager:
    """
    Creates the duty tables and applies named migrations once each.

    initialize() is idempotent and safe to call at every start-up.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def initialize(self) -> list[str]:
        """
        Create base schema and apply pending migrations.

        Returns:
            Names of the migrations applied by this call
        """
        logger.info(f"Initializing duty store schema: {self.db_path}")
        with closing(self._connect()) as conn:
            cursor = conn.cursor()
            self._create_base_schema(cursor)
            self._create_schema_migrations_table(cursor)
            applied = self._run_migrations(cursor)
            conn.commit()
        if applied:
            logger.info(f"Applied {len(applied)} migration(s) to {self.db_path}")
        return applied

    def applied_migrations(self) -> list[str]:
        """Names recorded in schema_migrations, oldest first."""
        with closing(self._connect()) as conn:
            rows = conn.execute("SELECT name FROM schema_migrations ORDER BY applied_at, name").fetchall()
        return [row["name"] for row in rows]

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        try:
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    def _create_base_schema(self, cursor) -> None:
        # One row per normalized participant key
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS duty_counts (
                duty_key TEXT PRIMARY KEY,
                count INTEGER NOT NULL DEFAULT 0 CHECK (count >= 0),
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

        # At most one row: the most recent assignee
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS duty_state (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                last_assignee_key TEXT,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _create_schema_migrations_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _run_migrations(self, cursor) -> list[str]:
        done = {row["name"] for row in cursor.execute("SELECT name FROM schema_migrations")}
        applied = []
        for name, migrate in self._get_migrations():
            if name in done:
                continue
            logger.info(f"Applying migration: {name}")
            migrate(cursor)
            cursor.execute("INSERT INTO schema_migrations (name) VALUES (?)", (name,))
            applied.append(name)
        return applied

    def _get_migrations(self):
        return [
            ("add_duty_count_index", self._migration_add_duty_count_index),
            ("seed_duty_state_row", self._migration_seed_duty_state_row),
        ]

    def _migration_add_duty_count_index(self, cursor) -> None:
        # History is read ordered by count
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_duty_counts_count ON duty_counts(count)")

    def _migration_seed_duty_state_row(self, cursor) -> None:
        cursor.execute("INSERT OR IGNORE INTO duty_state (id, last_assignee_key) VALUES (1, NULL)")
