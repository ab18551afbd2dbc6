"""
Memo store types.

A memo is keyed by (owner_id, sequence_number). The store assigns
sequence numbers; callers never invent them.
"""

import time
from dataclasses import dataclass


def current_stored_time() -> str:
    """Creation timestamp in epoch milliseconds, as stored in the table."""
    return str(int(time.time() * 1000))


@dataclass(frozen=True)
class MemoRecord:
    """One stored memo."""

    owner_id: str            # LINE user id of the creator
    sequence_number: int     # Per-owner, assigned by the store (0 = unassigned)
    memo_text: str
    stored_time: str         # Epoch milliseconds
