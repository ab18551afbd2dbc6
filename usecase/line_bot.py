"""
LINE Bot Use Case - entry point

Checks run strictly in order, first failure wins:
  1. body missing                 -> INVALID_REQUEST
  2. signature missing            -> INVALID_REQUEST
  3. signature does not verify    -> INVALID_SIGNATURE
  4. body is not a LINE envelope  -> UNEXPECTED
  5. dispatch every event concurrently, wait for all of them
  6. any unexpected outcome       -> UNEXPECTED
  7. otherwise                    -> OK

Events are independent: one failing dispatch neither stops the others nor
changes their outcomes. Replies already sent for healthy events stay sent
even when the overall result is UNEXPECTED.
"""

import asyncio
import logging
from typing import Optional

from transport.line.base import LineBot
from transport.line.normalize import parse_webhook_body

from .dispatcher import EventDispatcher
from .types import EventOutcome, UseCaseResult

logger = logging.getLogger(__name__)


class LineBotUseCase:
    """Validation, parsing, fan-out and outcome aggregation. No business logic."""

    def __init__(self, line_bot: LineBot, dispatcher: EventDispatcher):
        self.line_bot = line_bot
        self.dispatcher = dispatcher

    async def execute(self, body: Optional[str], signature: Optional[str]) -> UseCaseResult:
        """
        Process one webhook call.

        Args:
            body: Raw request body, None if absent
            signature: x-line-signature header, None if absent

        Returns:
            UseCaseResult for the HTTP adapter
        """
        if body is None:
            logger.warning("Webhook request without body")
            return UseCaseResult.INVALID_REQUEST
        if signature is None:
            logger.warning("Webhook request without signature")
            return UseCaseResult.INVALID_REQUEST

        try:
            if not self.line_bot.check_signature(body, signature):
                logger.warning("Webhook signature rejected")
                return UseCaseResult.INVALID_SIGNATURE
            payload = parse_webhook_body(body)
        except Exception as e:
            logger.error(f"Webhook request could not be processed: {e}", exc_info=True)
            return UseCaseResult.UNEXPECTED

        results = await asyncio.gather(
            *(self.dispatcher.dispatch(event) for event in payload.events),
            return_exceptions=True,
        )

        failures = [
            result
            for result in results
            if isinstance(result, BaseException)
            or (isinstance(result, EventOutcome) and result.is_unexpected)
        ]
        if failures:
            logger.error(
                f"{len(failures)} of {len(results)} events failed",
                extra={"failures": [repr(failure) for failure in failures]},
            )
            return UseCaseResult.UNEXPECTED

        logger.info(f"Processed {len(results)} events")
        return UseCaseResult.OK
