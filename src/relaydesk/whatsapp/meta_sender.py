"""Outbound WhatsApp messaging via the Meta Cloud (Graph) API.

Security: NEVER log recipient numbers or message text. Only hashes and lengths.
"""

from typing import Any

from relaydesk.config import DEFAULT_GRAPH_API_VERSION
from relaydesk.observability.logging import get_logger, hash_identifier
from relaydesk.observability.redaction import safe_log_context
from relaydesk.providers import ProviderError, post_json_or_raise

logger = get_logger(__name__)

GRAPH_BASE_URL = "https://graph.facebook.com"


def message_id(response: Any) -> str | None:
    """Extract ``messages[0].id`` from a Graph API send response."""
    try:
        return response["messages"][0]["id"]
    except (KeyError, IndexError, TypeError):
        return None


class WhatsAppSender:
    """Graph API client bound to one business phone number.

    Usage:
        sender = WhatsAppSender(phone_number_id="123", access_token="EAAG...")
        resp = sender.send_text("919876543210", "Hello")
        print(message_id(resp))

    Each method performs exactly one HTTP call and raises ProviderError on
    any failure. Nothing is retried.
    """

    def __init__(
        self,
        phone_number_id: str,
        access_token: str,
        api_version: str = DEFAULT_GRAPH_API_VERSION,
    ) -> None:
        self._phone_number_id = phone_number_id
        self._access_token = access_token
        self._api_version = api_version

    def _url(self, edge: str) -> str:
        return f"{GRAPH_BASE_URL}/{self._api_version}/{self._phone_number_id}/{edge}"

    def _auth_headers(self) -> dict[str, str]:
        if not self._phone_number_id or not self._access_token:
            raise ProviderError(
                None,
                {"error": "Missing WhatsApp config: PHONE_NUMBER_ID and WHATSAPP_ACCESS_TOKEN required"},
            )
        return {"Authorization": f"Bearer {self._access_token}"}

    def _send(self, payload: dict[str, Any], *, to: str, kind: str, text_len: int = 0) -> Any:
        headers = self._auth_headers()
        headers["Content-Type"] = "application/json"

        log_ctx = safe_log_context(
            to_hash=hash_identifier(to),
            kind=kind,
            text_len=text_len,
            provider="meta",
        )
        logger.info("sending outbound message via meta", extra={"extra_fields": log_ctx})

        try:
            response = post_json_or_raise(self._url("messages"), json=payload, headers=headers)
        except ProviderError as e:
            logger.error(
                "outbound send via meta failed",
                extra={
                    "extra_fields": {
                        **log_ctx,
                        **safe_log_context(status_code=e.status_code),
                    }
                },
            )
            raise

        logger.info("outbound message sent via meta", extra={"extra_fields": log_ctx})
        return response

    def send_text(self, to: str, body: str) -> Any:
        """Send a plain text message.

        Args:
            to: Recipient number, already normalized. NEVER logged.
            body: Message text. NEVER logged.

        Returns:
            Parsed Graph API response.

        Raises:
            ProviderError: On missing config, network failure or non-2xx.
        """
        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": body},
        }
        return self._send(payload, to=to, kind="text", text_len=len(body))

    def send_template(
        self,
        to: str,
        name: str,
        language_code: str = "en",
        components: list[dict[str, Any]] | None = None,
    ) -> Any:
        """Send a pre-approved template message.

        ``components`` follows the Graph API shape (header/body/button
        entries with their parameters); see ``relaydesk.whatsapp.templates``.
        """
        template: dict[str, Any] = {"name": name, "language": {"code": language_code}}
        if components:
            template["components"] = components

        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": to,
            "type": "template",
            "template": template,
        }
        return self._send(payload, to=to, kind="template")

    def upload_media(self, content: bytes, filename: str, mime_type: str) -> str:
        """Upload a file to the media endpoint and return its media id.

        Raises:
            ProviderError: On failure, or if the response carries no id.
        """
        headers = self._auth_headers()
        log_ctx = safe_log_context(mime_type=mime_type, size=len(content), provider="meta")
        logger.info("uploading media via meta", extra={"extra_fields": log_ctx})

        response = post_json_or_raise(
            self._url("media"),
            headers=headers,
            data={"messaging_product": "whatsapp", "type": mime_type},
            files={"file": (filename, content, mime_type)},
        )

        media_id = response.get("id") if isinstance(response, dict) else None
        if not media_id:
            raise ProviderError(None, {"error": "media upload returned no id", "response": response})

        logger.info("media uploaded via meta", extra={"extra_fields": log_ctx})
        return media_id
