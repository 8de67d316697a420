"""SQLite storage for the serialized member list."""

import json
import logging
from pathlib import Path
import sqlite3

from models import Member

logger = logging.getLogger(__name__)

DEFAULT_KEY = "familyTreeData"


def create_database(db_path: Path) -> sqlite3.Connection:
    """Create SQLite database with a key/value storage table."""
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS storage (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
    """)

    conn.commit()
    return conn


class SQLiteStorage:
    """
    Persistence adapter keeping the whole member list as one JSON value.

    `load()` returns None when nothing has been saved under the key yet.
    """

    def __init__(self, db_path: Path | str, key: str = DEFAULT_KEY):
        self.db_path = Path(db_path)
        self.key = key

    def load(self) -> list[Member] | None:
        conn = create_database(self.db_path)
        try:
            row = conn.execute("SELECT value FROM storage WHERE key = ?", (self.key,)).fetchone()
        finally:
            conn.close()

        if row is None:
            return None
        records = json.loads(row[0])
        logger.debug("Loaded %d members from %s", len(records), self.db_path)
        return [Member.from_dict(r) for r in records]

    def save(self, members: list[Member]):
        payload = json.dumps([m.to_dict() for m in members], ensure_ascii=False)
        conn = create_database(self.db_path)
        try:
            conn.execute(
                "INSERT OR REPLACE INTO storage (key, value) VALUES (?, ?)",
                (self.key, payload),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Saved %d members to %s", len(members), self.db_path)
