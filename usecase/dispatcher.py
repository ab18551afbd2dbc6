"""
Event Dispatcher

Classifies one webhook event, runs the matching command handler and sends
the resulting replies through the LINE client.

Routing grammar on the message text (first match wins):
  regist:<text>   -> register <text> (kept verbatim; blank text is rejected)
  list...         -> list, capped at max_list_number
  delete:<n>      -> delete memo <n>
  ask:<prompt>    -> generate an image
  anything else   -> echo the text plus a copy-to-clipboard template

Follow events get a welcome message. Anything else (non-text message,
follow without payload, other event kinds) is an unexpected outcome and
nothing is sent.

No exception ever leaves dispatch(): failures become EventOutcome("unexpected").
"""

import logging
from typing import Optional, assert_never

from image_craft import ImageCraft
from memo_store import MemoStore
from transport.line.base import LineBot
from transport.line.schemas import (
    ButtonsTemplate,
    ClipboardAction,
    FollowEvent,
    InboundEvent,
    MessageEvent,
    ReplyMessage,
    TemplateReply,
    TextReply,
    UnsupportedEvent,
)

from .commands import (
    DEFAULT_LOADING_SECONDS,
    execute_ask_command,
    execute_delete_command,
    execute_list_command,
    execute_register_command,
    to_replies,
)
from .types import CommandResult, EventOutcome

logger = logging.getLogger(__name__)

REGISTER_PREFIX = "regist:"
LIST_PREFIX = "list"
DELETE_PREFIX = "delete:"
ASK_PREFIX = "ask:"

WELCOME_TEXT = "Welcome!"
WELCOME_BACK_TEXT = "Welcome back!"
EMPTY_MEMO_TEXT = "Memo text is empty"

CLIPBOARD_TEXT_LIMIT = 1000   # LINE caps clipboardText at 1000 characters

DEFAULT_MAX_LIST_NUMBER = 5


def parse_sequence_number(raw: str) -> Optional[int]:
    """
    Parse the argument of a delete command.

    Only a plain positive decimal integer is accepted (surrounding
    whitespace ignored). Signs, decimals, zero and empty input are
    rejected so a typo can never delete the wrong memo.

    Returns:
        The sequence number, or None if raw is not one
    """
    value = raw.strip()
    if not value.isdecimal():
        return None
    number = int(value)
    if number < 1:
        return None
    return number


def build_echo_replies(text: str, quote_token: Optional[str]) -> list[ReplyMessage]:
    return [
        TextReply(text=text, quote_token=quote_token),
        TemplateReply(
            alt_text="Echoing your text",
            template=ButtonsTemplate(
                title="Echo bot",
                text="Copy the echoed text to your clipboard",
                actions=[ClipboardAction(label="Copy", clipboard_text=text[:CLIPBOARD_TEXT_LIMIT])],
            ),
        ),
    ]


class EventDispatcher:
    """Routes one webhook event at a time. Holds collaborators only, no state."""

    def __init__(
        self,
        line_bot: LineBot,
        memo_store: MemoStore,
        image_craft: ImageCraft,
        max_list_number: int = DEFAULT_MAX_LIST_NUMBER,
        loading_seconds: int = DEFAULT_LOADING_SECONDS,
    ):
        self.line_bot = line_bot
        self.memo_store = memo_store
        self.image_craft = image_craft
        self.max_list_number = max_list_number
        self.loading_seconds = loading_seconds

    async def dispatch(self, event: InboundEvent) -> EventOutcome:
        """
        Handle one event end to end, including the reply send.

        Returns:
            EventOutcome "ok" once replies were sent, "unexpected" for an
            unrecognized event shape or any raised error
        """
        reply_token = event.reply_token
        try:
            replies = await self._replies_for(event)
            if replies is None:
                return EventOutcome(
                    status="unexpected",
                    reply_token=reply_token,
                    error=f"Unsupported event shape: {event.type}",
                )

            logger.debug(f"Sending {len(replies)} replies for {reply_token}")
            await self.line_bot.reply_message(reply_token, replies)
        except Exception as e:
            logger.error(f"Event dispatch failed for {reply_token}: {e}", exc_info=True)
            return EventOutcome(status="unexpected", reply_token=reply_token, error=str(e))

        return EventOutcome(status="ok", reply_token=reply_token)

    async def _replies_for(self, event: InboundEvent) -> Optional[list[ReplyMessage]]:
        if isinstance(event, FollowEvent):
            return self._follow_replies(event)
        if isinstance(event, MessageEvent):
            return await self._message_replies(event)
        if isinstance(event, UnsupportedEvent):
            logger.warning(f"Unsupported event type: {event.type}")
            return None
        assert_never(event)

    def _follow_replies(self, event: FollowEvent) -> Optional[list[ReplyMessage]]:
        if event.follow is None:
            logger.warning("Follow event without follow payload")
            return None
        if event.follow.is_unblocked:
            return [TextReply(text=WELCOME_BACK_TEXT)]
        return [TextReply(text=WELCOME_TEXT)]

    async def _message_replies(self, event: MessageEvent) -> Optional[list[ReplyMessage]]:
        message = event.message
        if message.type != "text" or message.text is None:
            logger.warning(f"Message type not accepted: {message.type}")
            return None

        text = message.text
        owner_id = event.owner_id
        quote_token = message.quote_token

        logger.info(
            "Text message received",
            extra={"owner_id": owner_id, "reply_token": event.reply_token},
        )

        if text.startswith(REGISTER_PREFIX):
            memo_text = text[len(REGISTER_PREFIX):]
            if not memo_text.strip():
                return to_replies(CommandResult.failed(EMPTY_MEMO_TEXT), quote_token)
            return await execute_register_command(
                self.memo_store,
                owner_id,
                memo_text,
                quote_token,
            )

        if text.startswith(LIST_PREFIX):
            return await execute_list_command(
                self.memo_store,
                owner_id,
                quote_token,
                self.max_list_number,
            )

        if text.startswith(DELETE_PREFIX):
            argument = text[len(DELETE_PREFIX):]
            sequence_number = parse_sequence_number(argument)
            if sequence_number is None:
                logger.info(f"Rejected delete argument {argument!r} from {owner_id}")
                return to_replies(
                    CommandResult.failed(f"'{argument.strip()}' is not a valid memo number"),
                    quote_token,
                )
            return await execute_delete_command(
                self.memo_store,
                owner_id,
                sequence_number,
                quote_token,
            )

        if text.startswith(ASK_PREFIX):
            return await execute_ask_command(
                self.image_craft,
                text[len(ASK_PREFIX):],
                quote_token,
                owner_id,
                self.line_bot,
                self.loading_seconds,
            )

        return build_echo_replies(text, quote_token)
