"""Meta Cloud API adapter - validate and parse webhook payloads.

Payload structure:
{
  "object": "whatsapp_business_account",
  "entry": [{
    "changes": [{
      "value": {
        "metadata": {"phone_number_id": "..."},
        "messages": [{"from": "PHONE", "id": "MSG_ID", "type": "text", "text": {"body": "..."}}]
      },
      "field": "messages"
    }]
  }]
}
"""

import hashlib
import hmac
from typing import Any, Iterator

from relaydesk.domain.phone import normalize

from .models import (
    ButtonReply,
    InboundMessage,
    InteractiveReply,
    TextReply,
    UnsupportedMessage,
)

BUSINESS_ACCOUNT_OBJECT = "whatsapp_business_account"


class InvalidPayloadError(Exception):
    """Raised when a webhook payload has an invalid shape."""


class SignatureVerificationError(Exception):
    """Raised when HMAC signature verification fails."""


def verify_signature(payload_bytes: bytes, signature_header: str, app_secret: str) -> None:
    """Verify Meta webhook signature (``X-Hub-Signature-256: sha256=<hex>``).

    Raises:
        SignatureVerificationError: If signature is invalid or missing.
    """
    if not signature_header:
        raise SignatureVerificationError("missing signature header")

    if not signature_header.startswith("sha256="):
        raise SignatureVerificationError("invalid signature format")

    expected_sig = signature_header[len("sha256="):]

    computed_sig = hmac.new(
        key=app_secret.encode("utf-8"),
        msg=payload_bytes,
        digestmod=hashlib.sha256,
    ).hexdigest()

    if not hmac.compare_digest(computed_sig, expected_sig):
        raise SignatureVerificationError("signature mismatch")


def is_business_account_event(payload: Any) -> bool:
    return isinstance(payload, dict) and payload.get("object") == BUSINESS_ACCOUNT_OBJECT


def _as_list(value: Any, field: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidPayloadError(f"{field} must be a list")
    return value


def _as_dict(value: Any, field: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidPayloadError(f"{field} must be an object")
    return value


def iter_raw_messages(payload: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield every message in entry[].changes[].value.messages[].

    Missing levels are treated as empty. Status-only changes (delivery and
    read receipts) have no ``messages`` and yield nothing.

    Raises:
        InvalidPayloadError: A level is present with the wrong type.
    """
    for entry in _as_list(payload.get("entry"), "entry"):
        entry = _as_dict(entry, "entry[]")
        for change in _as_list(entry.get("changes"), "changes"):
            change = _as_dict(change, "changes[]")
            value = _as_dict(change.get("value"), "value")
            for message in _as_list(value.get("messages"), "messages"):
                yield _as_dict(message, "messages[]")


def _text_body(message: dict[str, Any]) -> str:
    text = message.get("text")
    if isinstance(text, dict) and isinstance(text.get("body"), str):
        return text["body"]
    return ""


def _button_payload(message: dict[str, Any]) -> str:
    button = message.get("button")
    if isinstance(button, dict) and isinstance(button.get("payload"), str):
        return button["payload"]
    return ""


def _interactive_button_id(message: dict[str, Any]) -> str:
    interactive = message.get("interactive")
    if not isinstance(interactive, dict):
        return ""
    button_reply = interactive.get("button_reply")
    if isinstance(button_reply, dict) and isinstance(button_reply.get("id"), str):
        return button_reply["id"]
    return ""


def parse_message(message: dict[str, Any]) -> InboundMessage:
    """Turn one raw webhook message into its variant.

    The first non-empty source wins: text body, then button payload, then
    interactive button-reply id. The sender is normalized.
    """
    sender = normalize(message.get("from"))

    body = _text_body(message)
    if body:
        return TextReply(sender=sender, body=body)

    payload = _button_payload(message)
    if payload:
        return ButtonReply(sender=sender, payload=payload)

    button_id = _interactive_button_id(message)
    if button_id:
        return InteractiveReply(sender=sender, button_id=button_id)

    return UnsupportedMessage(sender=sender, kind=str(message.get("type", "unknown")))


def extract_messages(payload: dict[str, Any]) -> list[InboundMessage]:
    return [parse_message(raw) for raw in iter_raw_messages(payload)]
