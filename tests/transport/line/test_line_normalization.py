"""
LINE Envelope Parsing Tests

Verify the webhook body turns into typed events and replies serialize
to the Messaging API wire format.
"""

import json

import pytest

from transport.line.normalize import EnvelopeParseError, parse_webhook_body
from transport.line.schemas import (
    ButtonsTemplate,
    ClipboardAction,
    FollowEvent,
    ImageReply,
    MessageEvent,
    TemplateReply,
    TextReply,
    UnsupportedEvent,
    serialize_reply,
)


class TestParseWebhookBody:
    """Test envelope parsing."""

    def test_text_message_event(self, text_event, envelope):
        """Text message keeps text, sender and quote token."""
        payload = parse_webhook_body(envelope(text_event("regist:milk", quote_token="Q9")))

        assert payload.destination == "Ubot"
        assert len(payload.events) == 1
        event = payload.events[0]
        assert isinstance(event, MessageEvent)
        assert event.reply_token == "R1"
        assert event.owner_id == "U1"
        assert event.message.text == "regist:milk"
        assert event.message.quote_token == "Q9"

    def test_follow_event(self, envelope):
        """Follow event carries the unblocked flag."""
        body = envelope({
            "type": "follow",
            "replyToken": "R2",
            "source": {"type": "user", "userId": "U2"},
            "follow": {"isUnblocked": True},
        })

        event = parse_webhook_body(body).events[0]

        assert isinstance(event, FollowEvent)
        assert event.follow is not None
        assert event.follow.is_unblocked is True

    def test_other_event_kinds_are_unsupported(self, envelope):
        """Unfollow, postback and friends parse as UnsupportedEvent."""
        body = envelope(
            {"type": "unfollow", "source": {"type": "user", "userId": "U3"}},
            {"type": "postback", "replyToken": "R4", "postback": {"data": "x"}},
        )

        events = parse_webhook_body(body).events

        assert all(isinstance(event, UnsupportedEvent) for event in events)
        assert events[0].reply_token is None
        assert events[1].reply_token == "R4"

    def test_non_text_message_still_parses(self, envelope):
        """Sticker messages parse; rejecting them is the dispatcher's job."""
        body = envelope({
            "type": "message",
            "replyToken": "R5",
            "source": {"type": "user", "userId": "U5"},
            "message": {"type": "sticker", "id": "M5", "packageId": "1", "stickerId": "2"},
        })

        event = parse_webhook_body(body).events[0]

        assert isinstance(event, MessageEvent)
        assert event.message.type == "sticker"
        assert event.message.text is None

    def test_message_without_user_id(self, text_event, envelope):
        """Missing userId gives an empty owner id."""
        event = parse_webhook_body(envelope(text_event("list", user_id=None))).events[0]

        assert event.owner_id == ""

    def test_empty_events(self, envelope):
        """Verification calls from the console carry no events."""
        assert parse_webhook_body(envelope()).events == []

    def test_invalid_json_raises(self):
        """Non-JSON body is rejected."""
        with pytest.raises(EnvelopeParseError):
            parse_webhook_body("not json")

    def test_non_object_raises(self):
        """JSON that is not an object is rejected."""
        with pytest.raises(EnvelopeParseError):
            parse_webhook_body("[1, 2, 3]")

    def test_missing_events_raises(self):
        """Envelope must carry an events array."""
        with pytest.raises(EnvelopeParseError):
            parse_webhook_body(json.dumps({"destination": "Ubot"}))

    def test_message_without_reply_token_raises(self, envelope):
        """Message events always carry a reply token."""
        body = envelope({
            "type": "message",
            "source": {"type": "user", "userId": "U1"},
            "message": {"type": "text", "id": "M1", "text": "hi"},
        })

        with pytest.raises(EnvelopeParseError):
            parse_webhook_body(body)


class TestSerializeReply:
    """Test outbound wire format."""

    def test_text_reply_with_quote_token(self):
        """Quote token is sent as quoteToken."""
        assert serialize_reply(TextReply(text="hi", quote_token="Q1")) == {
            "type": "text",
            "text": "hi",
            "quoteToken": "Q1",
        }

    def test_text_reply_without_quote_token(self):
        """Absent quote token is omitted, not sent as null."""
        assert serialize_reply(TextReply(text="hi")) == {"type": "text", "text": "hi"}

    def test_image_reply(self):
        """Image reply uses camelCase URL fields."""
        reply = ImageReply(
            original_content_url="https://img/a.png",
            preview_image_url="https://img/a.png",
        )

        assert serialize_reply(reply) == {
            "type": "image",
            "originalContentUrl": "https://img/a.png",
            "previewImageUrl": "https://img/a.png",
        }

    def test_template_reply(self):
        """Buttons template with a clipboard action."""
        reply = TemplateReply(
            alt_text="alt",
            template=ButtonsTemplate(
                title="Echo bot",
                text="Copy",
                actions=[ClipboardAction(label="Copy", clipboard_text="hello")],
            ),
        )

        assert serialize_reply(reply) == {
            "type": "template",
            "altText": "alt",
            "template": {
                "type": "buttons",
                "title": "Echo bot",
                "text": "Copy",
                "actions": [
                    {"type": "clipboard", "label": "Copy", "clipboardText": "hello"},
                ],
            },
        }
