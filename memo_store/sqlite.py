"""
SQLite-backed memo store.

Local-first default backend. Implements exactly the same interface as
StubMemoStore and DynamoDBMemoStore, so it can be swapped without changing
any use case code.

Design:
- One table: memo_store
- Primary key (owner_id, sequence_number)
- Sequence allocation (read last, insert next) runs inside one
  BEGIN IMMEDIATE transaction, so concurrent puts for the same owner
  cannot collide
- sqlite3 is blocking: every operation runs in the default executor,
  serialized by a lock around the single connection
"""

import asyncio
import logging
import sqlite3
import threading
from typing import Callable, Optional, TypeVar

from memo_store.base import MemoStore, MemoStoreError
from memo_store.types import MemoRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SQLiteMemoStore(MemoStore):
    """SQLite memo store. Pure plumbing: SQLite is an implementation detail."""

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize SQLite memo store.

        Args:
            db_path: Path to SQLite database file.
                    If None, uses ':memory:' (in-memory, useful for testing).
        """
        self.db_path = db_path or ":memory:"
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(
            self.db_path,
            check_same_thread=False,
            isolation_level=None,
        )
        self._initialize_db()

    def _initialize_db(self) -> None:
        """Create schema if missing. Enables WAL for file databases."""
        with self._lock:
            cursor = self._conn.cursor()
            if self.db_path != ":memory:":
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("PRAGMA synchronous=FULL")

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS memo_store (
                    owner_id TEXT NOT NULL,
                    sequence_number INTEGER NOT NULL,
                    memo_text TEXT NOT NULL,
                    stored_time TEXT NOT NULL,
                    PRIMARY KEY (owner_id, sequence_number)
                )
            """)
        logger.debug(f"SQLite memo store initialized: {self.db_path}")

    async def _run(self, operation: Callable[[], T]) -> T:
        def locked() -> T:
            with self._lock:
                return operation()

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, locked)
        except sqlite3.Error as e:
            logger.error(f"SQLite memo store error: {e}", exc_info=True)
            raise MemoStoreError(f"Memo store unavailable: {e}") from e

    async def get_all(self) -> list[MemoRecord]:
        def query() -> list[MemoRecord]:
            rows = self._conn.execute(
                """
                SELECT owner_id, sequence_number, memo_text, stored_time
                FROM memo_store
                ORDER BY owner_id, sequence_number
                """
            ).fetchall()
            return [MemoRecord(*row) for row in rows]

        return await self._run(query)

    async def get_by_owner(self, owner_id: str) -> list[MemoRecord]:
        def query() -> list[MemoRecord]:
            rows = self._conn.execute(
                """
                SELECT owner_id, sequence_number, memo_text, stored_time
                FROM memo_store
                WHERE owner_id = ?
                ORDER BY sequence_number DESC
                """,
                (owner_id,),
            ).fetchall()
            return [MemoRecord(*row) for row in rows]

        return await self._run(query)

    async def put(self, record: MemoRecord) -> MemoRecord:
        def insert() -> MemoRecord:
            cursor = self._conn.cursor()
            cursor.execute("BEGIN IMMEDIATE")
            try:
                (last,) = cursor.execute(
                    "SELECT COALESCE(MAX(sequence_number), 0) FROM memo_store WHERE owner_id = ?",
                    (record.owner_id,),
                ).fetchone()
                stored = MemoRecord(
                    owner_id=record.owner_id,
                    sequence_number=last + 1,
                    memo_text=record.memo_text,
                    stored_time=record.stored_time,
                )
                cursor.execute(
                    """
                    INSERT INTO memo_store (owner_id, sequence_number, memo_text, stored_time)
                    VALUES (?, ?, ?, ?)
                    """,
                    (stored.owner_id, stored.sequence_number, stored.memo_text, stored.stored_time),
                )
                cursor.execute("COMMIT")
                return stored
            except Exception:
                cursor.execute("ROLLBACK")
                raise

        stored = await self._run(insert)
        logger.info(
            f"Memo stored: owner_id={stored.owner_id}, sequence_number={stored.sequence_number}"
        )
        return stored

    async def delete(self, owner_id: str, sequence_number: int) -> None:
        def remove() -> None:
            self._conn.execute(
                "DELETE FROM memo_store WHERE owner_id = ? AND sequence_number = ?",
                (owner_id, sequence_number),
            )

        await self._run(remove)
        logger.info(f"Memo deleted: owner_id={owner_id}, sequence_number={sequence_number}")

    def close(self) -> None:
        with self._lock:
            self._conn.close()
