"""Tests for WhatsApp webhook payload parsing."""

import hashlib
import hmac

import pytest

from relaydesk.whatsapp.meta_adapter import (
    InvalidPayloadError,
    SignatureVerificationError,
    extract_messages,
    is_business_account_event,
    parse_message,
    verify_signature,
)
from relaydesk.whatsapp.models import (
    ButtonReply,
    InteractiveReply,
    TextReply,
    UnsupportedMessage,
)


def _payload(*messages, phone_number_id="123456789"):
    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "WHATSAPP_BUSINESS_ACCOUNT_ID",
                "changes": [
                    {
                        "value": {
                            "messaging_product": "whatsapp",
                            "metadata": {"phone_number_id": phone_number_id},
                            "messages": list(messages),
                        },
                        "field": "messages",
                    }
                ],
            }
        ],
    }


class TestParseMessage:
    def test_text_message(self):
        msg = parse_message({"from": "15550100", "type": "text", "text": {"body": "Yes"}})
        assert msg == TextReply(sender="15550100", body="Yes")
        assert msg.reply == "Yes"

    def test_button_payload(self):
        msg = parse_message({"from": "15550100", "type": "button", "button": {"payload": "ATTENDING", "text": "I'll be there"}})
        assert msg == ButtonReply(sender="15550100", payload="ATTENDING")
        assert msg.reply == "ATTENDING"

    def test_interactive_button_reply(self):
        msg = parse_message(
            {
                "from": "15550100",
                "type": "interactive",
                "interactive": {"type": "button_reply", "button_reply": {"id": "rsvp_no", "title": "No"}},
            }
        )
        assert msg == InteractiveReply(sender="15550100", button_id="rsvp_no")
        assert msg.reply == "rsvp_no"

    def test_text_wins_over_button(self):
        msg = parse_message({"from": "1", "text": {"body": "typed"}, "button": {"payload": "tapped"}})
        assert isinstance(msg, TextReply)
        assert msg.reply == "typed"

    def test_button_wins_over_interactive(self):
        msg = parse_message(
            {
                "from": "1",
                "button": {"payload": "tapped"},
                "interactive": {"button_reply": {"id": "ignored"}},
            }
        )
        assert isinstance(msg, ButtonReply)

    def test_empty_text_falls_through(self):
        msg = parse_message({"from": "1", "text": {"body": ""}, "button": {"payload": "tapped"}})
        assert isinstance(msg, ButtonReply)

    def test_media_message_is_unsupported(self):
        msg = parse_message({"from": "1", "type": "image", "image": {"id": "img"}})
        assert msg == UnsupportedMessage(sender="1", kind="image")
        assert msg.reply == ""

    def test_sender_is_normalized(self):
        msg = parse_message({"from": "+1 555 0100", "text": {"body": "hi"}})
        assert msg.sender == "15550100"

    def test_missing_sender_is_empty(self):
        assert parse_message({"text": {"body": "hi"}}).sender == ""


class TestExtractMessages:
    def test_iterates_all_entries_changes_and_messages(self):
        payload = _payload(
            {"from": "1", "text": {"body": "a"}},
            {"from": "2", "text": {"body": "b"}},
        )
        payload["entry"].append(
            {"changes": [{"value": {"messages": [{"from": "3", "button": {"payload": "c"}}]}}]}
        )

        replies = [(m.sender, m.reply) for m in extract_messages(payload)]

        assert replies == [("1", "a"), ("2", "b"), ("3", "c")]

    def test_status_only_change_yields_nothing(self):
        payload = {
            "object": "whatsapp_business_account",
            "entry": [{"changes": [{"value": {"statuses": [{"id": "wamid.x", "status": "read"}]}}]}],
        }
        assert extract_messages(payload) == []

    def test_missing_entry_yields_nothing(self):
        assert extract_messages({"object": "whatsapp_business_account"}) == []

    def test_wrong_shape_raises(self):
        with pytest.raises(InvalidPayloadError):
            extract_messages({"object": "whatsapp_business_account", "entry": "oops"})

        with pytest.raises(InvalidPayloadError):
            extract_messages({"entry": [{"changes": [{"value": {"messages": [42]}}]}]})


class TestHelpers:
    def test_is_business_account_event(self):
        assert is_business_account_event({"object": "whatsapp_business_account"})
        assert not is_business_account_event({"object": "page"})
        assert not is_business_account_event([])


class TestVerifySignature:
    def test_valid_signature_passes(self):
        payload = b'{"test": "data"}'
        secret = "test_secret"
        sig = hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()

        verify_signature(payload, f"sha256={sig}", secret)

    def test_invalid_signature_raises(self):
        with pytest.raises(SignatureVerificationError, match="mismatch"):
            verify_signature(b'{"test": "data"}', "sha256=invalid_sig", "test_secret")

    def test_missing_signature_raises(self):
        with pytest.raises(SignatureVerificationError, match="missing"):
            verify_signature(b"test", "", "secret")

    def test_wrong_format_raises(self):
        with pytest.raises(SignatureVerificationError, match="format"):
            verify_signature(b"test", "md5=abc", "secret")
