import os
import sqlite3
from typing import Optional

from deskclock.ports.store_port import PersistentStore
from deskclock.utils import custom_exception as ce
from deskclock.utils.logging_handler import setup_logger


class SqliteStoreAdapter(PersistentStore):
    """Key/value store kept in a single SQLite table of JSON strings."""

    def __init__(self, db_path="deskclock.db"):
        self.logger = setup_logger(__name__)
        self.db_path = db_path
        db_dir = os.path.dirname(os.path.abspath(db_path))
        os.makedirs(db_dir, exist_ok=True)
        # heartbeats and request handlers may live on different threads
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self._initialize_tables()

    def _initialize_tables(self):
        """Private method to ensure schema exists."""
        self.conn.execute("""
        CREATE TABLE IF NOT EXISTS Settings(
            Key TEXT PRIMARY KEY,
            Value TEXT NOT NULL,
            UpdatedOn TEXT
        );""")
        self.conn.commit()

    def _read(self, key: str) -> Optional[str]:
        try:
            cur = self.conn.execute("SELECT Value FROM Settings WHERE Key = ?", (key,))
            row = cur.fetchone()
        except sqlite3.Error as e:
            raise ce.StorageError(f"Database error reading '{key}': {e}") from e
        return row[0] if row else None

    def _write(self, key: str, raw: str) -> None:
        try:
            self.conn.execute("""
                INSERT INTO Settings (Key, Value, UpdatedOn) VALUES (?, ?, DATETIME('now'))
                ON CONFLICT(Key) DO UPDATE SET Value = excluded.Value, UpdatedOn = excluded.UpdatedOn
            """, (key, raw))
            self.conn.commit()
        except sqlite3.Error as e:
            raise ce.StorageError(f"Database error writing '{key}': {e}") from e

    def close(self) -> None:
        try:
            self.conn.close()
        except sqlite3.Error:
            self.logger.exception("Error closing settings database")
