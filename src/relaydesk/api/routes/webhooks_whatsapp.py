"""WhatsApp webhook routes - verification and RSVP reply ingestion.

Only numbers on the allow-list (numbers we messaged) get their replies
recorded and acknowledged. Everything else is skipped silently.

Security: sender numbers and reply text are never logged, only hashes.
"""

import json
from typing import Any

from fastapi import APIRouter, Depends, Header, Query, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from relaydesk.api.context import RelayContext, get_relay
from relaydesk.observability.logging import get_logger, hash_identifier
from relaydesk.observability.redaction import safe_log_context
from relaydesk.providers import ProviderError
from relaydesk.whatsapp.meta_adapter import (
    SignatureVerificationError,
    extract_messages,
    is_business_account_event,
    verify_signature,
)
from relaydesk.whatsapp.templates import acknowledgement_text

router = APIRouter(tags=["webhooks"])

logger = get_logger(__name__)

SUBSCRIBE_MODE = "subscribe"


@router.get("/webhook")
def webhook_verify(
    hub_mode: str | None = Query(None, alias="hub.mode"),
    hub_verify_token: str | None = Query(None, alias="hub.verify_token"),
    hub_challenge: str | None = Query(None, alias="hub.challenge"),
    relay: RelayContext = Depends(get_relay),
) -> Response:
    """Webhook ownership check sent by Meta during subscription setup.

    Returns:
        200 with hub.challenge if mode and token match.
        403 with an empty body otherwise.
    """
    expected_token = relay.settings.verify_token

    if hub_mode == SUBSCRIBE_MODE and expected_token and hub_verify_token == expected_token:
        logger.info("whatsapp webhook verified")
        return PlainTextResponse(hub_challenge or "", status_code=200)

    logger.warning(
        "whatsapp webhook verification failed",
        extra={
            "extra_fields": safe_log_context(
                hub_mode=hub_mode or "missing",
                token_configured=bool(expected_token),
            )
        },
    )
    return Response(status_code=403)


def ingest_events(payload: dict[str, Any], relay: RelayContext) -> int:
    """Record and acknowledge replies from allow-listed senders.

    Returns:
        Number of replies accepted.

    Raises:
        InvalidPayloadError: Malformed entry/changes/messages structure.
    """
    accepted = 0

    for message in extract_messages(payload):
        reply = message.reply
        sender = message.sender
        log_ctx = safe_log_context(
            from_hash=hash_identifier(sender),
            variant=type(message).__name__,
            reply_len=len(reply),
        )

        if not reply or not sender:
            logger.info("inbound message without reply content", extra={"extra_fields": log_ctx})
            continue

        if not relay.allow_list.contains(sender):
            logger.info("auto-reply blocked for sender", extra={"extra_fields": log_ctx})
            continue

        relay.replies.record(sender, reply)
        accepted += 1
        logger.info("rsvp reply recorded", extra={"extra_fields": log_ctx})

        try:
            relay.whatsapp.send_text(sender, acknowledgement_text(reply))
        except ProviderError as e:
            logger.warning(
                "acknowledgement send failed",
                extra={"extra_fields": {**log_ctx, **safe_log_context(status_code=e.status_code)}},
            )

    return accepted


@router.post("/webhook")
async def webhook_receive(
    request: Request,
    x_hub_signature_256: str | None = Header(None, alias="X-Hub-Signature-256"),
    relay: RelayContext = Depends(get_relay),
) -> Response:
    """Receive WhatsApp Cloud API events.

    Returns:
        200 {"status": "EVENT_RECEIVED"} once the batch is processed.
        200 {"status": "IGNORED"} for non business-account events or a bad
        signature (so Meta does not keep retrying).
        500 if the payload cannot be processed.
    """
    body_bytes = await request.body()

    app_secret = relay.settings.app_secret
    if app_secret:
        try:
            verify_signature(body_bytes, x_hub_signature_256 or "", app_secret)
        except SignatureVerificationError as e:
            logger.warning(
                "whatsapp signature verification failed",
                extra={"extra_fields": safe_log_context(error=str(e))},
            )
            return JSONResponse({"status": "IGNORED"})

    try:
        payload = json.loads(body_bytes)

        if not is_business_account_event(payload):
            object_type = payload.get("object") if isinstance(payload, dict) else None
            logger.info(
                "non business-account webhook ignored",
                extra={"extra_fields": safe_log_context(object_type=object_type or "missing")},
            )
            return JSONResponse({"status": "IGNORED"})

        accepted = await run_in_threadpool(ingest_events, payload, relay)
    except Exception:
        logger.exception("whatsapp webhook processing failed")
        return Response(status_code=500)

    logger.info(
        "whatsapp webhook processed",
        extra={"extra_fields": safe_log_context(accepted=accepted)},
    )
    return JSONResponse({"status": "EVENT_RECEIVED"})
