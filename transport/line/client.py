"""
LINE Messaging API Client

Sends replies and loading indicators back to LINE.
No formatting intelligence. No retries. No logic.
"""

import logging
from typing import Sequence

import httpx

from .base import LineBot, LineBotError
from .schemas import ReplyMessage, serialize_reply
from .security import verify_signature

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.line.me"


class LineMessagingClient(LineBot):
    """
    LINE Messaging API over httpx.

    One short-lived AsyncClient per call, same as the webhook handler
    that owns the request.
    """

    def __init__(
        self,
        channel_secret: str,
        access_token: str,
        api_base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 30.0,
    ):
        """
        Args:
            channel_secret: Secret used to verify webhook signatures
            access_token: Channel access token for API calls
            api_base_url: Messaging API base URL
            timeout: Per-request timeout in seconds
        """
        self.channel_secret = channel_secret
        self.access_token = access_token
        self.api_base_url = api_base_url.rstrip("/")
        self.timeout = timeout

    def check_signature(self, body: str, signature: str) -> bool:
        return verify_signature(body, signature, self.channel_secret)

    async def show_loading_animation(self, chat_id: str, loading_seconds: int) -> None:
        """
        Show the loading animation in a one-to-one chat.

        The animation disappears as soon as a reply arrives.
        loading_seconds must be a multiple of 5 between 5 and 60.
        """
        await self._post(
            "/v2/bot/chat/loading/start",
            {"chatId": chat_id, "loadingSeconds": loading_seconds},
        )
        logger.debug(f"Loading animation started for {chat_id} ({loading_seconds}s)")

    async def reply_message(self, reply_token: str, messages: Sequence[ReplyMessage]) -> None:
        """
        Send a reply batch using the event's reply token.

        An empty batch is tolerated and sends nothing.

        Raises:
            LineBotError: If the API call fails
        """
        if not messages:
            logger.debug(f"No reply messages for token {reply_token}, skipping send")
            return

        payload = {
            "replyToken": reply_token,
            "messages": [serialize_reply(message) for message in messages],
        }
        await self._post("/v2/bot/message/reply", payload)
        logger.info(
            "Reply sent to LINE",
            extra={
                "reply_token": reply_token,
                "message_count": len(messages),
            },
        )

    async def _post(self, path: str, payload: dict) -> None:
        if not self.access_token:
            raise LineBotError("LINE_CHANNEL_ACCESS_TOKEN not configured")

        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.api_base_url}{path}",
                    json=payload,
                    headers=headers,
                    timeout=self.timeout,
                )
        except httpx.RequestError as e:
            logger.error(f"HTTP request to LINE failed: {e}", exc_info=True)
            raise LineBotError(f"HTTP request failed: {e}") from e

        if not response.is_success:
            error_text = response.text
            logger.error(
                f"LINE API error: {response.status_code} - {error_text}",
                extra={
                    "status_code": response.status_code,
                    "error_body": error_text,
                    "path": path,
                },
            )
            raise LineBotError(f"LINE API returned {response.status_code}")
