"""
LINE Envelope Parsing

PURE CONVERSION - NO LOGIC, NO NETWORK

Turns the raw webhook body into a LineWebhookPayload.
Events keep their LINE shape; classification happens in the dispatcher.
"""

import json

from pydantic import ValidationError

from .schemas import LineWebhookPayload


class EnvelopeParseError(Exception):
    """Webhook body is not a valid LINE envelope."""
    pass


def parse_webhook_body(body: str) -> LineWebhookPayload:
    """
    Parse a LINE webhook body.

    Args:
        body: Raw request body, exactly as signed by LINE

    Returns:
        LineWebhookPayload with zero or more events

    Raises:
        EnvelopeParseError: Body is not JSON or does not match the envelope shape
    """

    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        raise EnvelopeParseError(f"Invalid JSON payload: {e}") from e

    if not isinstance(payload, dict):
        raise EnvelopeParseError("Webhook payload must be a JSON object")

    try:
        return LineWebhookPayload.model_validate(payload)
    except ValidationError as e:
        raise EnvelopeParseError(f"Invalid payload structure: {e}") from e
