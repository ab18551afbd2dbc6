"""
Abstract memo store interface.

Persistence is a service, not state.
The use case depends only on this interface, not on specific implementations.
"""

from abc import ABC, abstractmethod

from memo_store.types import MemoRecord


class MemoStoreError(Exception):
    """Memo store operation failed."""
    pass


class MemoStore(ABC):
    """
    Abstract memo boundary.

    Key properties:
    - get_by_owner returns records newest first
    - put assigns the sequence number as last-known + 1 for the owner,
      and fails the whole put if the last-known lookup fails
    - delete is idempotent: deleting a missing key is not an error
    - failures raise MemoStoreError
    """

    @abstractmethod
    async def get_all(self) -> list[MemoRecord]:
        """Every record regardless of owner."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_owner(self, owner_id: str) -> list[MemoRecord]:
        """All records of one owner, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def put(self, record: MemoRecord) -> MemoRecord:
        """
        Append a memo.

        Args:
            record: Memo to store; its sequence_number is ignored

        Returns:
            The stored record with its assigned sequence number
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, owner_id: str, sequence_number: int) -> None:
        """Delete one memo by key."""
        raise NotImplementedError
