"""LINE Transport Layer - Module Exports"""

from .base import LineBot, LineBotError
from .client import LineMessagingClient
from .normalize import EnvelopeParseError, parse_webhook_body
from .schemas import (
    ButtonsTemplate,
    ClipboardAction,
    EventSource,
    FollowDetail,
    FollowEvent,
    ImageReply,
    InboundEvent,
    LineWebhookPayload,
    MessageContent,
    MessageEvent,
    ReplyMessage,
    TemplateReply,
    TextReply,
    UnsupportedEvent,
    serialize_reply,
)
from .security import (
    LINE_SIGNATURE_HEADER,
    SignatureVerificationError,
    compute_signature,
    verify_signature,
)
from .stub import StubLineBot

# The webhook router is imported from transport.line.webhook directly;
# it depends on the use case, which depends on this package.

__all__ = [
    # Schemas
    "LineWebhookPayload",
    "InboundEvent",
    "FollowEvent",
    "FollowDetail",
    "MessageEvent",
    "MessageContent",
    "EventSource",
    "UnsupportedEvent",
    "ReplyMessage",
    "TextReply",
    "ImageReply",
    "TemplateReply",
    "ButtonsTemplate",
    "ClipboardAction",
    "serialize_reply",
    # Parsing
    "parse_webhook_body",
    "EnvelopeParseError",
    # Security
    "LINE_SIGNATURE_HEADER",
    "compute_signature",
    "verify_signature",
    "SignatureVerificationError",
    # Client
    "LineBot",
    "LineBotError",
    "LineMessagingClient",
    "StubLineBot",
]
