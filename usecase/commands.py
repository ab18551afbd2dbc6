"""
Command handlers: register, list, delete, ask.

Each handler owns one failure-contained unit of work:
- it never raises
- store or image failures become a CommandResult with status "failed"
- to_replies() is the single place a CommandResult turns into replies,
  keeping the caller's quote token so LINE threads the answer correctly

Every handler returns at least one reply.
"""

import asyncio
import logging
import uuid
from typing import Optional

from image_craft import ImageCraft
from memo_store import MemoRecord, MemoStore, current_stored_time
from transport.line.base import LineBot
from transport.line.schemas import ImageReply, ReplyMessage, TextReply

from .types import CommandResult

logger = logging.getLogger(__name__)

NO_DATA_TEXT = "No data found"
REGISTER_ERROR_TEXT = "An error occurred while registering"
LIST_ERROR_TEXT = "An error occurred while listing"
DELETE_ERROR_TEXT = "An error occurred while deleting"
ASK_ERROR_TEXT = "An error occurred while generating the image"
GENERIC_ERROR_TEXT = "An error occurred"

DEFAULT_LOADING_SECONDS = 30


def _error_text(error: Exception, fallback: str) -> str:
    return str(error) or fallback


def to_replies(result: CommandResult, quote_token: Optional[str]) -> list[ReplyMessage]:
    """Turn a handler result into the replies the user sees."""
    if result.status == "success":
        return result.replies
    return [TextReply(text=result.error or GENERIC_ERROR_TEXT, quote_token=quote_token)]


async def execute_register_command(
    memo_store: MemoStore,
    owner_id: str,
    memo_text: str,
    quote_token: Optional[str],
) -> list[ReplyMessage]:
    """
    Store a memo for owner_id.

    The store assigns the sequence number.

    Returns:
        One text reply confirming the stored text, or the error text
    """
    try:
        await memo_store.put(
            MemoRecord(
                owner_id=owner_id,
                sequence_number=0,
                memo_text=memo_text,
                stored_time=current_stored_time(),
            )
        )
        result = CommandResult.success(
            [TextReply(text=f"{memo_text} has been registered", quote_token=quote_token)]
        )
    except Exception as e:
        logger.error(f"Register command failed for {owner_id}: {e}", exc_info=True)
        result = CommandResult.failed(_error_text(e, REGISTER_ERROR_TEXT))
    return to_replies(result, quote_token)


async def execute_list_command(
    memo_store: MemoStore,
    owner_id: str,
    quote_token: Optional[str],
    max_list_number: int,
) -> list[ReplyMessage]:
    """
    List the owner's memos, newest first, capped at max_list_number.

    Only the first reply carries the quote token.

    Returns:
        One text reply per memo, "No data found" if there are none,
        or the error text
    """
    try:
        records = await memo_store.get_by_owner(owner_id)
        replies: list[ReplyMessage] = [
            TextReply(text=record.memo_text, quote_token=quote_token if index == 0 else None)
            for index, record in enumerate(records[:max_list_number])
        ]
        if not replies:
            replies.append(TextReply(text=NO_DATA_TEXT, quote_token=quote_token))
        result = CommandResult.success(replies)
    except Exception as e:
        logger.error(f"List command failed for {owner_id}: {e}", exc_info=True)
        result = CommandResult.failed(_error_text(e, LIST_ERROR_TEXT))
    return to_replies(result, quote_token)


async def execute_delete_command(
    memo_store: MemoStore,
    owner_id: str,
    sequence_number: int,
    quote_token: Optional[str],
) -> list[ReplyMessage]:
    """
    Delete one memo by key.

    Deleting a memo that does not exist is reported the same way as a
    real deletion: the store's delete is idempotent.
    """
    try:
        await memo_store.delete(owner_id, sequence_number)
        result = CommandResult.success(
            [TextReply(text=f"Memo {sequence_number} has been deleted", quote_token=quote_token)]
        )
    except Exception as e:
        logger.error(f"Delete command failed for {owner_id}: {e}", exc_info=True)
        result = CommandResult.failed(_error_text(e, DELETE_ERROR_TEXT))
    return to_replies(result, quote_token)


async def _show_loading(line_bot: LineBot, owner_id: str, loading_seconds: int) -> None:
    # Loading failures never change the reply.
    if not owner_id:
        return
    try:
        await line_bot.show_loading_animation(owner_id, loading_seconds)
    except Exception as e:
        logger.warning(f"Loading animation failed for {owner_id}: {e}")


async def _craft_image(image_craft: ImageCraft, ordered_text: str, image_key: str) -> CommandResult:
    try:
        await image_craft.create_image(ordered_text, image_key)
        image_url = await image_craft.get_image_url(image_key)
    except Exception as e:
        logger.error(f"Image generation failed for {image_key}: {e}", exc_info=True)
        return CommandResult.failed(_error_text(e, ASK_ERROR_TEXT))
    return CommandResult.success(
        [ImageReply(original_content_url=image_url, preview_image_url=image_url)]
    )


async def execute_ask_command(
    image_craft: ImageCraft,
    ordered_text: str,
    quote_token: Optional[str],
    owner_id: str,
    line_bot: LineBot,
    loading_seconds: int = DEFAULT_LOADING_SECONDS,
) -> list[ReplyMessage]:
    """
    Generate an image for ordered_text.

    The loading animation and the image pipeline run concurrently and
    both are awaited. A loading failure is ignored; a pipeline failure
    becomes a text reply (never an image reply).

    Returns:
        One image reply (same URL for full and preview), or the error text
    """
    # Messages without a quote token still need a unique object key.
    image_key = quote_token or uuid.uuid4().hex
    _, result = await asyncio.gather(
        _show_loading(line_bot, owner_id, loading_seconds),
        _craft_image(image_craft, ordered_text, image_key),
    )
    return to_replies(result, quote_token)
