"""SMS relay to Twilio using operator-supplied credentials."""

from typing import Any

import requests
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from twilio.base.exceptions import TwilioException

from relaydesk.observability.logging import get_logger
from relaydesk.observability.redaction import safe_log_context
from relaydesk.sms.twilio_sms import send_sms as twilio_send_sms

logger = get_logger(__name__)

router = APIRouter(tags=["sms"])


class SendSmsRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    to: str | None = None
    from_: str | None = Field(None, alias="from")
    body: str | None = None
    account_sid: str | None = None
    auth_token: str | None = None


@router.post("/send-sms")
def send_sms(req: SendSmsRequest) -> Any:
    """Send one SMS.

    Returns:
        400 on missing parameters.
        200 {"success": true, "sid"} on success.
        500 {"error", "code", "status"} when Twilio rejects the request or
        cannot be reached (code and status are null then).
    """
    if not all((req.to, req.from_, req.body, req.account_sid, req.auth_token)):
        return JSONResponse(status_code=400, content={"error": "Missing parameters"})

    try:
        sid = twilio_send_sms(
            account_sid=req.account_sid,
            auth_token=req.auth_token,
            to=req.to,
            from_=req.from_,
            body=req.body,
        )
    except TwilioException as e:
        code = getattr(e, "code", None)
        status = getattr(e, "status", None)
        logger.error(
            "twilio sms failed",
            extra={"extra_fields": safe_log_context(code=code, status=status)},
        )
        return JSONResponse(
            status_code=500,
            content={"error": getattr(e, "msg", None) or str(e), "code": code, "status": status},
        )
    except requests.RequestException as e:
        # Twilio's HTTP client sends through requests and lets transport errors through
        logger.error(
            "twilio sms request failed",
            extra={"extra_fields": safe_log_context(error_type=type(e).__name__)},
        )
        return JSONResponse(
            status_code=500,
            content={"error": str(e), "code": None, "status": None},
        )

    return {"success": True, "sid": sid}
