"""LINE bot use case: command handlers, event dispatcher and entry point."""

from .commands import (
    execute_ask_command,
    execute_delete_command,
    execute_list_command,
    execute_register_command,
    to_replies,
)
from .dispatcher import EventDispatcher, parse_sequence_number
from .line_bot import LineBotUseCase
from .types import CommandResult, EventOutcome, UseCaseResult

__all__ = [
    "LineBotUseCase",
    "EventDispatcher",
    "UseCaseResult",
    "CommandResult",
    "EventOutcome",
    "execute_register_command",
    "execute_list_command",
    "execute_delete_command",
    "execute_ask_command",
    "to_replies",
    "parse_sequence_number",
]
