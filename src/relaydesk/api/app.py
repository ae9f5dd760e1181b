"""ASGI entry point: ``uvicorn relaydesk.api.app:app``."""

from .factory import create_app

app = create_app()
