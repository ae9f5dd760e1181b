"""Process-wide relay state, owned by the app instead of module globals.

``create_app`` builds one RelayContext at startup and stores it on
``app.state.relay``. Nothing is persisted, so there is no teardown. Tests
build a fresh context per app for isolation.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol

from fastapi import Request

from relaydesk.config import Settings
from relaydesk.domain.allow_list import AllowList
from relaydesk.domain.otp import OtpStore
from relaydesk.domain.replies import ReplyStore
from relaydesk.whatsapp.meta_sender import WhatsAppSender


class MessageSender(Protocol):
    """What the routes need from a WhatsApp sender (real or fake)."""

    def send_text(self, to: str, body: str) -> Any: ...

    def send_template(
        self,
        to: str,
        name: str,
        language_code: str = "en",
        components: list[dict[str, Any]] | None = None,
    ) -> Any: ...

    def upload_media(self, content: bytes, filename: str, mime_type: str) -> str: ...


@dataclass
class RelayContext:
    settings: Settings
    whatsapp: MessageSender
    allow_list: AllowList = field(default_factory=AllowList)
    replies: ReplyStore = field(default_factory=ReplyStore)
    otp_codes: OtpStore | None = None

    def __post_init__(self) -> None:
        if self.otp_codes is None:
            self.otp_codes = OtpStore(ttl_seconds=self.settings.otp_ttl_seconds)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RelayContext":
        sender = WhatsAppSender(
            phone_number_id=settings.phone_number_id,
            access_token=settings.access_token,
            api_version=settings.graph_api_version,
        )
        return cls(settings=settings, whatsapp=sender)


def get_relay(request: Request) -> RelayContext:
    """FastAPI dependency returning the app's RelayContext."""
    return request.app.state.relay
