"""
LINE Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Defines the contract between the LINE Messaging API and the use case:
- inbound webhook envelope and its events
- outbound reply messages
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Discriminator, Field, Tag


# ============================================================================
# INBOUND WEBHOOK EVENTS
# ============================================================================

class EventSource(BaseModel):
    """Where an event came from. Only one-to-one user chats carry userId."""

    type: str = "user"
    user_id: Optional[str] = Field(None, alias="userId")

    class Config:
        frozen = True
        populate_by_name = True


class FollowDetail(BaseModel):
    """Payload of a follow event."""

    is_unblocked: bool = Field(..., alias="isUnblocked")

    class Config:
        frozen = True
        populate_by_name = True


class FollowEvent(BaseModel):
    """User added the bot as a friend, or unblocked it."""

    type: Literal["follow"]
    reply_token: str = Field(..., alias="replyToken")
    source: Optional[EventSource] = None
    follow: Optional[FollowDetail] = None

    class Config:
        frozen = True
        populate_by_name = True


class MessageContent(BaseModel):
    """
    Message object inside a message event.

    Only `text` messages are handled; other types (image, sticker, ...)
    are kept so the dispatcher can reject them explicitly.
    """

    type: str
    id: Optional[str] = None
    text: Optional[str] = None
    quote_token: Optional[str] = Field(None, alias="quoteToken")

    class Config:
        frozen = True
        populate_by_name = True


class MessageEvent(BaseModel):
    """User sent a message to the bot."""

    type: Literal["message"]
    reply_token: str = Field(..., alias="replyToken")
    source: Optional[EventSource] = None
    message: MessageContent

    class Config:
        frozen = True
        populate_by_name = True

    @property
    def owner_id(self) -> str:
        """Sender user id, empty when the source carries none."""
        if self.source is None:
            return ""
        return self.source.user_id or ""


class UnsupportedEvent(BaseModel):
    """Any other LINE event kind (unfollow, postback, join, ...)."""

    type: str
    reply_token: Optional[str] = Field(None, alias="replyToken")

    class Config:
        frozen = True
        populate_by_name = True
        extra = "allow"


def _event_kind(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
    else:
        kind = getattr(value, "type", None)
    if kind in ("follow", "message"):
        return kind
    return "unsupported"


InboundEvent = Annotated[
    Union[
        Annotated[FollowEvent, Tag("follow")],
        Annotated[MessageEvent, Tag("message")],
        Annotated[UnsupportedEvent, Tag("unsupported")],
    ],
    Discriminator(_event_kind),
]


class LineWebhookPayload(BaseModel):
    """
    Full LINE webhook request body.

    ref: https://developers.line.biz/en/reference/messaging-api/#request-body
    """

    destination: Optional[str] = Field(None, description="Bot user id receiving the events")
    events: list[InboundEvent] = Field(..., description="Webhook events, usually one")

    class Config:
        frozen = True


# ============================================================================
# OUTBOUND REPLY MESSAGES
# ============================================================================

class TextReply(BaseModel):
    """Plain text reply, optionally quoting the source message."""

    type: Literal["text"] = "text"
    text: str
    quote_token: Optional[str] = Field(None, alias="quoteToken")

    class Config:
        frozen = True
        populate_by_name = True


class ImageReply(BaseModel):
    """Image reply. Both URLs must be HTTPS and publicly retrievable."""

    type: Literal["image"] = "image"
    original_content_url: str = Field(..., alias="originalContentUrl")
    preview_image_url: str = Field(..., alias="previewImageUrl")

    class Config:
        frozen = True
        populate_by_name = True


class ClipboardAction(BaseModel):
    """Template action copying text to the user's clipboard."""

    type: Literal["clipboard"] = "clipboard"
    label: str
    clipboard_text: str = Field(..., alias="clipboardText")

    class Config:
        frozen = True
        populate_by_name = True


class ButtonsTemplate(BaseModel):
    type: Literal["buttons"] = "buttons"
    title: Optional[str] = None
    text: str
    actions: list[ClipboardAction]

    class Config:
        frozen = True
        populate_by_name = True


class TemplateReply(BaseModel):
    """Structured widget reply (buttons template)."""

    type: Literal["template"] = "template"
    alt_text: str = Field(..., alias="altText")
    template: ButtonsTemplate

    class Config:
        frozen = True
        populate_by_name = True


ReplyMessage = Union[TextReply, ImageReply, TemplateReply]


def serialize_reply(message: ReplyMessage) -> dict[str, Any]:
    """Wire format expected by the Messaging API (camelCase, no nulls)."""
    return message.model_dump(by_alias=True, exclude_none=True)
