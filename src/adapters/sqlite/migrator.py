"""
Forward-only SQL migrations for SQLite.

Each `NNNN_name.sql` file in the migrations directory is applied once, in
filename order, and recorded in the `_migrations` table. Only the part of a
file above an optional `-- Down` marker is executed.
"""

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

DOWN_MARKER = "-- Down"


class SQLiteMigrator:
    def __init__(self, db_path: str, migrations_dir: str | Path):
        self.db_path = db_path
        self.migrations_dir = Path(migrations_dir)

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute("""
            CREATE TABLE IF NOT EXISTS _migrations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                filename TEXT UNIQUE NOT NULL,
                applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
            );
        """)
        return conn

    def available_migrations(self) -> list[str]:
        return sorted(p.name for p in self.migrations_dir.glob("*.sql"))

    def applied_migrations(self) -> set[str]:
        conn = self._get_connection()
        try:
            return {row[0] for row in conn.execute("SELECT filename FROM _migrations")}
        finally:
            conn.close()

    def pending_migrations(self) -> list[str]:
        applied = self.applied_migrations()
        return [name for name in self.available_migrations() if name not in applied]

    def run_migrations(self) -> list[str]:
        """Apply all pending migrations. Returns the filenames applied, in order."""
        pending = self.pending_migrations()
        if not pending:
            logger.info("Database %s is up to date", self.db_path)
            return []

        conn = self._get_connection()
        try:
            for filename in pending:
                logger.info("Applying migration: %s", filename)
                self._apply(conn, filename)
        finally:
            conn.close()

        logger.info("Applied %d migration(s) to %s", len(pending), self.db_path)
        return pending

    def _apply(self, conn: sqlite3.Connection, filename: str) -> None:
        script = (self.migrations_dir / filename).read_text().split(DOWN_MARKER)[0]
        try:
            conn.executescript(script)
            conn.execute("INSERT INTO _migrations (filename) VALUES (?)", (filename,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RuntimeError(f"Migration {filename} failed: {e}") from e
