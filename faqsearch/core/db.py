"""
SQLite access for the embedding store.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator

from .errors import StorageError

# Seconds to wait on a locked database before giving up
BUSY_TIMEOUT_SEC = 5.0

SCHEMA_SQL = '''
    CREATE TABLE IF NOT EXISTS embeddings (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        label TEXT NOT NULL,
        vector BLOB NOT NULL
    )
'''


@contextmanager
def get_db(db_path: str) -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection."""
    try:
        conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT_SEC)
    except sqlite3.Error as e:
        raise StorageError(f"Cannot open database '{db_path}': {e}", operation="open") from e
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: str):
    """Initialize the database with the embeddings table. Safe to call repeatedly."""
    with get_db(db_path) as conn:
        try:
            conn.execute(SCHEMA_SQL)
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"Schema creation failed: {e}", operation="initialize") from e


def health_check(db_path: str):
    """Check database health."""
    try:
        with get_db(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [table[0] for table in cursor.fetchall()]
            return 'embeddings' in table_names
    except (StorageError, sqlite3.Error):
        return False
