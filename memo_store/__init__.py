"""
Memo store module exports.

Clean interface for the use case to import memo store components.
"""

from memo_store.base import MemoStore, MemoStoreError
from memo_store.dynamodb import DynamoDBMemoStore
from memo_store.sqlite import SQLiteMemoStore
from memo_store.stub import DisabledMemoStore, StubMemoStore
from memo_store.types import MemoRecord, current_stored_time

__all__ = [
    "MemoStore",
    "MemoStoreError",
    "MemoRecord",
    "current_stored_time",
    "StubMemoStore",
    "DisabledMemoStore",
    "SQLiteMemoStore",
    "DynamoDBMemoStore",
]
