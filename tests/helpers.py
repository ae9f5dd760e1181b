"""Shared test helpers (plain functions and classes, not fixtures)."""

from unittest.mock import MagicMock

TEST_VERIFY_TOKEN = "test_verify_token"


class LogRecorder:
    """Stands in for a module logger and records every call."""

    def __init__(self):
        self.calls: list[tuple[str, tuple, dict]] = []

    def _record(self, level: str, *args, **kwargs):
        self.calls.append((level, args, kwargs))

    def info(self, *args, **kwargs):
        self._record("info", *args, **kwargs)

    def warning(self, *args, **kwargs):
        self._record("warning", *args, **kwargs)

    def error(self, *args, **kwargs):
        self._record("error", *args, **kwargs)

    def exception(self, *args, **kwargs):
        self._record("exception", *args, **kwargs)

    def debug(self, *args, **kwargs):
        self._record("debug", *args, **kwargs)

    def critical(self, *args, **kwargs):
        self._record("critical", *args, **kwargs)

    def get_all_logged_content(self) -> str:
        parts = []
        for _, args, kwargs in self.calls:
            parts.append(str(args))
            parts.append(str(kwargs))
        return " ".join(parts)

    def has_extra_field(self, key: str) -> bool:
        for _, _, kwargs in self.calls:
            extra_fields = kwargs.get("extra", {}).get("extra_fields", {})
            if key in extra_fields:
                return True
        return False


def http_response(status_code: int = 200, json_body=None, text: str = "", content_type: str = "application/json"):
    """Fake ``requests.Response``; ``json()`` raises ValueError when there is no JSON body."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.headers = {"Content-Type": content_type}
    if json_body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = json_body
    resp.text = text
    return resp


def webhook_payload(*messages, object_type: str = "whatsapp_business_account") -> dict:
    """WhatsApp Cloud API webhook envelope around the given messages."""
    return {
        "object": object_type,
        "entry": [
            {
                "id": "WHATSAPP_BUSINESS_ACCOUNT_ID",
                "changes": [
                    {
                        "value": {
                            "messaging_product": "whatsapp",
                            "metadata": {
                                "display_phone_number": "15550000",
                                "phone_number_id": "123456789",
                            },
                            "messages": list(messages),
                        },
                        "field": "messages",
                    }
                ],
            }
        ],
    }


def text_message(sender: str, body: str, message_id: str = "wamid.IN1") -> dict:
    return {
        "from": sender,
        "id": message_id,
        "timestamp": "1704067200",
        "type": "text",
        "text": {"body": body},
    }
