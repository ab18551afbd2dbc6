"""Pytest configuration and fixtures."""

import json
import sys
from pathlib import Path
from typing import Optional

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from image_craft import StubImageCraft  # noqa: E402
from memo_store import StubMemoStore  # noqa: E402
from transport.line.security import compute_signature  # noqa: E402
from transport.line.stub import StubLineBot  # noqa: E402
from usecase import EventDispatcher, LineBotUseCase  # noqa: E402

CHANNEL_SECRET = "test_channel_secret"


@pytest.fixture
def channel_secret() -> str:
    return CHANNEL_SECRET


@pytest.fixture
def sign():
    """Sign a body the way LINE does with the test channel secret."""
    def _sign(body: str) -> str:
        return compute_signature(body, CHANNEL_SECRET)
    return _sign


@pytest.fixture
def text_event():
    """Build a raw LINE text message event."""
    def _text_event(
        text: str,
        user_id: Optional[str] = "U1",
        reply_token: str = "R1",
        quote_token: Optional[str] = "Q1",
    ) -> dict:
        message = {"type": "text", "id": "M1", "text": text}
        if quote_token is not None:
            message["quoteToken"] = quote_token
        source = {"type": "user"}
        if user_id is not None:
            source["userId"] = user_id
        return {
            "type": "message",
            "mode": "active",
            "timestamp": 1707500000000,
            "replyToken": reply_token,
            "source": source,
            "message": message,
        }
    return _text_event


@pytest.fixture
def envelope():
    """Serialize events into a webhook body."""
    def _envelope(*events: dict) -> str:
        return json.dumps({"destination": "Ubot", "events": list(events)})
    return _envelope


@pytest.fixture
def line_bot() -> StubLineBot:
    return StubLineBot(channel_secret=CHANNEL_SECRET)


@pytest.fixture
def memo_store() -> StubMemoStore:
    return StubMemoStore()


@pytest.fixture
def image_craft() -> StubImageCraft:
    return StubImageCraft()


@pytest.fixture
def dispatcher(line_bot, memo_store, image_craft) -> EventDispatcher:
    return EventDispatcher(
        line_bot=line_bot,
        memo_store=memo_store,
        image_craft=image_craft,
        max_list_number=5,
        loading_seconds=30,
    )


@pytest.fixture
def use_case(line_bot, dispatcher) -> LineBotUseCase:
    return LineBotUseCase(line_bot=line_bot, dispatcher=dispatcher)
