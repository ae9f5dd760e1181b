"""Run the relay with uvicorn: ``python -m relaydesk``."""

import uvicorn

from relaydesk.api.factory import create_app
from relaydesk.config import load_settings
from relaydesk.observability.logging import get_logger

logger = get_logger("relaydesk")


def main() -> None:
    settings = load_settings()
    app = create_app(settings)
    logger.info(
        "relay starting",
        extra={"extra_fields": {"port": settings.port, "webhook_path": "/webhook"}},
    )
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
