"""Phone verification by one-time passcode sent as a WhatsApp template."""

import re
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from relaydesk.api.context import RelayContext, get_relay
from relaydesk.domain.otp import generate_code
from relaydesk.domain.phone import normalize
from relaydesk.observability.logging import get_logger, hash_identifier
from relaydesk.observability.redaction import safe_log_context
from relaydesk.providers import ProviderError
from relaydesk.whatsapp.meta_sender import message_id
from relaydesk.whatsapp.templates import otp_components

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["otp"])

# E.164: "+", country code not starting with 0, at most 15 digits
_E164 = re.compile(r"^\+[1-9]\d{1,14}$")


class SendOtpRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    phone_number: str = ""


class VerifyOtpRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    phone_number: str = ""
    otp: str = ""


@router.post("/send-otp")
def send_otp(body: SendOtpRequest, relay: RelayContext = Depends(get_relay)) -> Any:
    """Send a fresh 6-digit code; any previous code for the number is replaced."""
    if not _E164.match(body.phone_number):
        return JSONResponse(
            status_code=400,
            content={"error": "Phone number must be in E.164 format (e.g. +12015553931)"},
        )

    number = normalize(body.phone_number)
    code = generate_code()

    try:
        response = relay.whatsapp.send_template(
            number,
            relay.settings.otp_template,
            "en",
            otp_components(code),
        )
    except ProviderError as e:
        return JSONResponse(status_code=e.status_code or 500, content={"error": e.body})

    relay.otp_codes.issue(number, code)
    logger.info(
        "otp issued",
        extra={"extra_fields": safe_log_context(to_hash=hash_identifier(number))},
    )
    return {"success": True, "messageId": message_id(response)}


@router.post("/verify-otp")
def verify_otp(body: VerifyOtpRequest, relay: RelayContext = Depends(get_relay)) -> dict:
    verified = relay.otp_codes.verify(body.phone_number, body.otp.strip())
    logger.info(
        "otp verification attempted",
        extra={
            "extra_fields": safe_log_context(
                to_hash=hash_identifier(normalize(body.phone_number)),
                verified=verified,
            )
        },
    )
    return {"verified": verified}
