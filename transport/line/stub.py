"""
Stub LINE client for testing and CI.

Records every call instead of talking to LINE.
Signatures are still checked for real against the given secret.
"""

from typing import Sequence

from .base import LineBot, LineBotError
from .schemas import ReplyMessage
from .security import verify_signature


class StubLineBot(LineBot):
    """
    Deterministic fake LINE client.

    Properties:
    - replies and loading calls are recorded in order
    - reply tokens listed in fail_reply_tokens raise LineBotError on send
    - fail_loading makes the loading indicator raise
    """

    def __init__(
        self,
        channel_secret: str = "stub_channel_secret",
        fail_reply_tokens: Sequence[str] = (),
        fail_loading: bool = False,
    ):
        self.channel_secret = channel_secret
        self.fail_reply_tokens = set(fail_reply_tokens)
        self.fail_loading = fail_loading
        self.replies: list[tuple[str, list[ReplyMessage]]] = []
        self.loading_calls: list[tuple[str, int]] = []

    def check_signature(self, body: str, signature: str) -> bool:
        return verify_signature(body, signature, self.channel_secret)

    async def show_loading_animation(self, chat_id: str, loading_seconds: int) -> None:
        self.loading_calls.append((chat_id, loading_seconds))
        if self.fail_loading:
            raise LineBotError("Loading animation unavailable")

    async def reply_message(self, reply_token: str, messages: Sequence[ReplyMessage]) -> None:
        if reply_token in self.fail_reply_tokens:
            raise LineBotError(f"Reply failed for {reply_token}")
        self.replies.append((reply_token, list(messages)))

    def replies_for(self, reply_token: str) -> list[ReplyMessage]:
        """All messages sent with the given reply token."""
        sent: list[ReplyMessage] = []
        for token, messages in self.replies:
            if token == reply_token:
                sent.extend(messages)
        return sent
