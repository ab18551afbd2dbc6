"""
Stub memo store for testing and CI.

In-memory, deterministic, no external dependencies.
"""

from dataclasses import replace

from memo_store.base import MemoStore, MemoStoreError
from memo_store.types import MemoRecord


class StubMemoStore(MemoStore):
    """
    Deterministic fake memo store.

    Properties:
    - Stores records in-memory ({owner_id: {sequence_number: record}})
    - Same sequence rules as the real backends
    - Records calls so tests can assert what the use case did
    """

    def __init__(self, records: list[MemoRecord] | None = None):
        self.storage: dict[str, dict[int, MemoRecord]] = {}
        self.calls: list[tuple] = []
        for record in records or []:
            self.storage.setdefault(record.owner_id, {})[record.sequence_number] = record

    async def get_all(self) -> list[MemoRecord]:
        self.calls.append(("get_all",))
        return [
            record
            for owner_id in sorted(self.storage)
            for _, record in sorted(self.storage[owner_id].items())
        ]

    async def get_by_owner(self, owner_id: str) -> list[MemoRecord]:
        self.calls.append(("get_by_owner", owner_id))
        owned = self.storage.get(owner_id, {})
        return [owned[number] for number in sorted(owned, reverse=True)]

    async def put(self, record: MemoRecord) -> MemoRecord:
        self.calls.append(("put", record.owner_id, record.memo_text))
        owned = self.storage.setdefault(record.owner_id, {})
        stored = replace(record, sequence_number=max(owned, default=0) + 1)
        owned[stored.sequence_number] = stored
        return stored

    async def delete(self, owner_id: str, sequence_number: int) -> None:
        self.calls.append(("delete", owner_id, sequence_number))
        self.storage.get(owner_id, {}).pop(sequence_number, None)


class DisabledMemoStore(MemoStore):
    """
    Memo store that is always unavailable.

    Used to verify that store failures become user-facing replies
    and never escalate to the HTTP result.
    """

    def __init__(self, message: str = "Memo store is disabled"):
        self.message = message

    async def get_all(self) -> list[MemoRecord]:
        raise MemoStoreError(self.message)

    async def get_by_owner(self, owner_id: str) -> list[MemoRecord]:
        raise MemoStoreError(self.message)

    async def put(self, record: MemoRecord) -> MemoRecord:
        raise MemoStoreError(self.message)

    async def delete(self, owner_id: str, sequence_number: int) -> None:
        raise MemoStoreError(self.message)
