"""
Append-only SQLite store for labeled embedding vectors.
"""

import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterable, Iterator, Sequence

from ..core.db import get_db, init_db
from ..core.errors import StorageError
from .codec import encode_vector, decode_vector
from .types import EmbeddingRecord
from util.logging import logger


class IVectorStore(ABC):
    """Abstract interface for embedding storage operations."""

    @abstractmethod
    def initialize(self) -> None:
        """Create the backing schema if needed. Must be idempotent."""
        pass

    @abstractmethod
    def append(self, label: str, vector: Sequence[float]) -> None:
        """Durably store one record, or raise StorageError and store nothing."""
        pass

    @abstractmethod
    def enumerate(self) -> Iterator[EmbeddingRecord]:
        """Lazily yield every stored record in a stable order."""
        pass


class ReadWriteLock:
    """Single-writer, multiple-reader lock. Writers wait for active readers to drain."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read_locked(self):
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self):
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class SQLiteVectorStore(IVectorStore):
    """
    Embedding store backed by a single SQLite table.

    Rows are `(id, label, vector)` where `vector` is the packed float32 blob
    from `codec.encode_vector`. Records are never updated or deleted.
    """

    def __init__(self, db_path: str, page_size: int = 500):
        """
        Initialize the store.

        Args:
            db_path: Path to the SQLite database file
            page_size: Rows fetched per read while enumerating
        """
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.db_path = db_path
        self.page_size = page_size
        self._lock = ReadWriteLock()

    def initialize(self) -> None:
        with self._lock.write_locked():
            init_db(self.db_path)
        logger.log_store_operation("initialize", {"db_path": self.db_path})

    def append(self, label: str, vector: Sequence[float]) -> None:
        blob = encode_vector(vector)
        with self._lock.write_locked():
            with get_db(self.db_path) as conn:
                try:
                    conn.execute(
                        "INSERT INTO embeddings (label, vector) VALUES (?, ?)",
                        (label, blob),
                    )
                    conn.commit()
                except sqlite3.Error as e:
                    conn.rollback()
                    logger.log_store_operation("append", {"label": label, "error": str(e)}, status="failed")
                    raise StorageError(f"Failed to append record: {e}", operation="append") from e
        logger.log_store_operation("append", {"label": label, "dimension": len(blob) // 4})

    def append_many(self, records: Iterable[EmbeddingRecord]) -> int:
        """
        Store a batch of records in a single transaction.

        Either every record is stored or none is.

        Returns:
            Number of records written
        """
        rows = [(record.label, encode_vector(record.vector)) for record in records]
        if not rows:
            return 0

        with self._lock.write_locked():
            with get_db(self.db_path) as conn:
                try:
                    conn.executemany(
                        "INSERT INTO embeddings (label, vector) VALUES (?, ?)",
                        rows,
                    )
                    conn.commit()
                except sqlite3.Error as e:
                    conn.rollback()
                    logger.log_store_operation("append_many", {"count": len(rows), "error": str(e)}, status="failed")
                    raise StorageError(f"Failed to append {len(rows)} records: {e}", operation="append_many") from e

        logger.log_store_operation("append_many", {"count": len(rows)})
        return len(rows)

    def enumerate(self) -> Iterator[EmbeddingRecord]:
        """
        Yield every record in ascending id order.

        The highest id is captured when iteration starts, so records appended
        while the enumeration is in progress are not returned. Each call
        re-reads the database.
        """
        with self._lock.read_locked():
            upper_id = self._read(
                "SELECT COALESCE(MAX(id), 0) FROM embeddings", (), "enumerate"
            )[0][0]

        last_id = 0
        while last_id < upper_id:
            with self._lock.read_locked():
                rows = self._read(
                    "SELECT id, label, vector FROM embeddings "
                    "WHERE id > ? AND id <= ? ORDER BY id LIMIT ?",
                    (last_id, upper_id, self.page_size),
                    "enumerate",
                )
            if not rows:
                return
            for row_id, label, blob in rows:
                last_id = row_id
                yield EmbeddingRecord(label=label, vector=decode_vector(blob))

    def count(self) -> int:
        """Get the number of stored records."""
        with self._lock.read_locked():
            return self._read("SELECT COUNT(*) FROM embeddings", (), "count")[0][0]

    def optimize(self) -> None:
        """Refresh query statistics and compact the database file."""
        with self._lock.write_locked():
            with get_db(self.db_path) as conn:
                try:
                    conn.execute("ANALYZE")
                    conn.commit()
                    conn.execute("VACUUM")
                except sqlite3.Error as e:
                    raise StorageError(f"Optimize failed: {e}", operation="optimize") from e
        logger.log_store_operation("optimize", {"db_path": self.db_path})

    def _read(self, sql: str, params: tuple, operation: str) -> list:
        with get_db(self.db_path) as conn:
            try:
                return conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                raise StorageError(f"Read failed during {operation}: {e}", operation=operation) from e
