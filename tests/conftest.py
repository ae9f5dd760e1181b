"""Shared pytest fixtures for relaydesk tests.

Every test gets its own RelayContext, so allow-list and reply state never
leak between tests.
"""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from relaydesk.api.context import RelayContext  # noqa: E402
from relaydesk.api.factory import create_app  # noqa: E402
from relaydesk.config import Settings  # noqa: E402
from relaydesk.providers import ProviderError  # noqa: E402

from helpers import TEST_VERIFY_TOKEN  # noqa: E402


class FakeSender:
    """Records every send; numbers in ``failing`` raise ProviderError."""

    def __init__(self):
        self.texts: list[tuple[str, str]] = []
        self.templates: list[tuple[str, str, str, list]] = []
        self.uploads: list[tuple[bytes, str, str]] = []
        self.failing: set[str] = set()
        self.upload_error: ProviderError | None = None

    def _check(self, to):
        if to in self.failing:
            raise ProviderError(400, {"error": {"message": "Recipient not valid", "code": 131030}})

    def send_text(self, to, body):
        self._check(to)
        self.texts.append((to, body))
        return {"messages": [{"id": f"wamid.text.{len(self.texts)}"}]}

    def send_template(self, to, name, language_code="en", components=None):
        self._check(to)
        self.templates.append((to, name, language_code, components or []))
        return {"messages": [{"id": f"wamid.tpl.{len(self.templates)}"}]}

    def upload_media(self, content, filename, mime_type):
        if self.upload_error is not None:
            raise self.upload_error
        self.uploads.append((content, filename, mime_type))
        return "media-123"


@pytest.fixture
def settings():
    return Settings(
        verify_token=TEST_VERIFY_TOKEN,
        phone_number_id="123456789",
        access_token="test-access-token",
        exotel_account_sid="exotel-sid",
        frontend_build_dir="/nonexistent/build",
    )


@pytest.fixture
def fake_sender():
    return FakeSender()


@pytest.fixture
def relay(settings, fake_sender):
    return RelayContext(settings=settings, whatsapp=fake_sender)


@pytest.fixture
def client(relay):
    app = create_app(context=relay, serve_frontend=False)
    return TestClient(app)
