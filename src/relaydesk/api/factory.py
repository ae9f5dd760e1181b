"""FastAPI application factory."""

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from relaydesk.config import Settings, load_settings
from relaydesk.observability.correlation import (
    CORRELATION_ID_HEADER,
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from relaydesk.observability.logging import get_logger
from relaydesk.observability.redaction import safe_log_context

from .context import RelayContext
from .routers import public
from .routes import calls, messages, otp, sms, webhooks_whatsapp
from .spa import mount_spa

logger = get_logger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{field}: {error.get('msg', 'invalid value')}" if field else error.get("msg", ""))
    return "; ".join(parts) or "Invalid request"


def create_app(
    settings: Settings | None = None,
    context: RelayContext | None = None,
    *,
    serve_frontend: bool = True,
) -> FastAPI:
    """Create the relay app.

    Args:
        settings: Configuration. Defaults to ``context.settings`` when a
                  context is given, else ``load_settings()``.
        context: Pre-built relay state (tests inject fakes here). Defaults
                 to a fresh RelayContext with a real WhatsApp sender.
        serve_frontend: Mount the SPA catch-all if the build exists.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = context.settings if context is not None else load_settings()
    if context is None:
        context = RelayContext.from_settings(settings)

    missing = settings.missing_required()
    if missing:
        logger.critical(
            "missing required configuration",
            extra={"extra_fields": {"missing": missing}},
        )

    app = FastAPI(title="relaydesk", docs_url=None, redoc_url=None)
    app.state.relay = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_log_middleware(request: Request, call_next) -> Response:
        logger.info(
            "request received",
            extra={
                "extra_fields": safe_log_context(method=request.method, path=request.url.path)
            },
        )
        return await call_next(request)

    # Registered last so it runs first and the request log carries the ID
    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        cid = request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
        token = set_correlation_id(cid)
        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response
        finally:
            reset_correlation_id(token)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = _validation_message(exc)
        logger.warning(
            "request validation failed",
            extra={"extra_fields": safe_log_context(path=request.url.path, errors=len(exc.errors()))},
        )
        return JSONResponse(status_code=400, content={"error": message})

    app.include_router(public.router)
    app.include_router(webhooks_whatsapp.router)
    app.include_router(messages.router)
    app.include_router(otp.router)
    app.include_router(calls.router)
    app.include_router(sms.router)

    if serve_frontend:
        mount_spa(app, settings.frontend_build_dir)

    return app
