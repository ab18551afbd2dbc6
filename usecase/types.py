"""
Use case result types.

Three levels, each explicit:
- CommandResult: one command handler (recovered locally, never escalates)
- EventOutcome:  one webhook event in the dispatcher
- UseCaseResult: one inbound HTTP call
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional

from transport.line.schemas import ReplyMessage

CommandStatus = Literal["success", "failed"]
EventStatus = Literal["ok", "unexpected"]


class UseCaseResult(str, Enum):
    """Terminal result of one webhook call."""

    OK = "ok"
    INVALID_SIGNATURE = "invalid_signature"
    INVALID_REQUEST = "invalid_request"
    UNEXPECTED = "unexpected"


@dataclass
class CommandResult:
    """Result of one command handler before it becomes user-facing replies."""

    status: CommandStatus
    replies: list[ReplyMessage] = field(default_factory=list)
    error: Optional[str] = None      # User-facing reason if status == "failed"

    @classmethod
    def success(cls, replies: list[ReplyMessage]) -> "CommandResult":
        return cls(status="success", replies=replies)

    @classmethod
    def failed(cls, error: str) -> "CommandResult":
        return cls(status="failed", error=error)


@dataclass
class EventOutcome:
    """Result of dispatching one webhook event."""

    status: EventStatus
    reply_token: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_unexpected(self) -> bool:
        return self.status == "unexpected"
