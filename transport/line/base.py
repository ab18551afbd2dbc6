from abc import ABC, abstractmethod
from typing import Sequence

from .schemas import ReplyMessage


class LineBotError(Exception):
    """LINE Messaging API call failed."""
    pass


class LineBot(ABC):
    """
    Abstract chat-platform boundary.
    The use case must depend ONLY on this interface.
    """

    @abstractmethod
    def check_signature(self, body: str, signature: str) -> bool:
        """Return True if body was signed with the configured channel secret."""
        raise NotImplementedError

    @abstractmethod
    async def show_loading_animation(self, chat_id: str, loading_seconds: int) -> None:
        """Show the typing/loading indicator in a one-to-one chat."""
        raise NotImplementedError

    @abstractmethod
    async def reply_message(self, reply_token: str, messages: Sequence[ReplyMessage]) -> None:
        """Send a batch of replies bound to one webhook event."""
        raise NotImplementedError
