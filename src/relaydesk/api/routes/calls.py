"""Outbound call relay to Exotel."""

from typing import Any

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from relaydesk.api.context import RelayContext, get_relay
from relaydesk.providers import ProviderError
from relaydesk.voice.exotel import connect_call

router = APIRouter(prefix="/api", tags=["calls"])


class MakeCallRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    username: str | None = None
    password: str | None = None
    from_number: str | None = None
    to_number: str | None = None
    caller_id: str | None = None


@router.post("/make-call")
def make_call(body: MakeCallRequest, relay: RelayContext = Depends(get_relay)) -> Any:
    """Trigger an Exotel call and relay Exotel's status and body verbatim."""
    fields = (body.username, body.password, body.from_number, body.to_number, body.caller_id)
    if not all(fields):
        return JSONResponse(status_code=400, content={"error": "Missing fields"})

    try:
        response = connect_call(
            account_sid=relay.settings.exotel_account_sid,
            username=body.username,
            password=body.password,
            from_number=body.from_number,
            to_number=body.to_number,
            caller_id=body.caller_id,
        )
    except ProviderError as e:
        return JSONResponse(status_code=500, content=e.body)

    # Exotel answers XML unless asked for JSON; non-JSON bodies pass through as text
    if isinstance(response.body, str):
        return Response(
            content=response.body,
            status_code=response.status_code,
            media_type=response.content_type or "text/plain",
        )
    return JSONResponse(status_code=response.status_code, content=response.body)
