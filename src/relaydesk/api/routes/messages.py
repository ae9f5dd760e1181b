"""Bulk WhatsApp sends from the admin console, plus RSVP status.

POST /api/send-messages   → text to many numbers (enables auto-reply)
POST /api/send-template   → approved template to many numbers
POST /api/send-location   → location template to many numbers
POST /api/upload-media    → upload a file, get a media id
POST /api/send-media      → media template to many numbers
GET  /api/rsvp-status     → last reply per number

Every bulk send runs the same sequential dispatch and adds a number to the
auto-reply allow-list only once a send to it succeeded.
"""

from typing import Any

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from relaydesk.api.context import RelayContext, get_relay
from relaydesk.domain.dispatch import dispatch, summarize
from relaydesk.observability.logging import get_logger
from relaydesk.observability.redaction import safe_log_context
from relaydesk.providers import ProviderError
from relaydesk.whatsapp import templates
from relaydesk.whatsapp.meta_sender import message_id

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["messages"])


# ── Schemas ───────────────────────────────────────────────────────────────────


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SendMessagesRequest(_CamelModel):
    message: str | None = None
    phone_numbers: list[Any] | None = None


class SendTemplateRequest(_CamelModel):
    phone_numbers: list[Any] | None = None
    template_name: str = Field(min_length=1)
    language_code: str = "en"
    components: list[dict[str, Any]] = Field(default_factory=list)


class SendLocationRequest(_CamelModel):
    phone_numbers: list[Any] | None = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    template_name: str = templates.LOCATION_TEMPLATE
    language_code: str = "en"


class SendMediaRequest(_CamelModel):
    phone_numbers: list[Any] | None = None
    media_id: str = Field(min_length=1)
    media_type: templates.MediaType = "document"
    template_name: str | None = None
    filename: str = "Invoice.pdf"
    language_code: str = "en"


# ── Helpers ───────────────────────────────────────────────────────────────────


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


def _numbers_error(phone_numbers: list[Any] | None) -> JSONResponse | None:
    if not phone_numbers:
        return _bad_request("phoneNumbers must be a non-empty array")
    return None


def _bulk_template(
    relay: RelayContext,
    phone_numbers: list[Any],
    *,
    name: str,
    language_code: str,
    components: list[dict[str, Any]],
) -> dict[str, Any]:
    def send(number: str) -> str | None:
        return message_id(
            relay.whatsapp.send_template(number, name, language_code, components)
        )

    results = dispatch(phone_numbers, send, relay.allow_list)
    return summarize(results, relay.allow_list)


# ── Routes ────────────────────────────────────────────────────────────────────


@router.post("/send-messages")
def send_messages(
    body: SendMessagesRequest,
    relay: RelayContext = Depends(get_relay),
) -> Any:
    """Send one text to every number and enable auto-reply for them.

    Returns:
        400 if the message or number list is missing.
        200 with per-number results otherwise, even if some sends failed.
    """
    if not body.message:
        return _bad_request("Message is required")
    if error := _numbers_error(body.phone_numbers):
        return error

    text = body.message

    def send(number: str) -> str | None:
        return message_id(relay.whatsapp.send_text(number, text))

    results = dispatch(body.phone_numbers, send, relay.allow_list)
    return summarize(results, relay.allow_list)


@router.post("/send-template")
def send_template(
    body: SendTemplateRequest,
    relay: RelayContext = Depends(get_relay),
) -> Any:
    if error := _numbers_error(body.phone_numbers):
        return error
    return _bulk_template(
        relay,
        body.phone_numbers,
        name=body.template_name,
        language_code=body.language_code,
        components=body.components,
    )


@router.post("/send-location")
def send_location(
    body: SendLocationRequest,
    relay: RelayContext = Depends(get_relay),
) -> Any:
    if error := _numbers_error(body.phone_numbers):
        return error
    components = templates.location_components(
        latitude=body.latitude,
        longitude=body.longitude,
        name=body.name,
        address=body.address,
    )
    return _bulk_template(
        relay,
        body.phone_numbers,
        name=body.template_name,
        language_code=body.language_code,
        components=components,
    )


@router.post("/upload-media")
def upload_media(
    file: UploadFile = File(...),
    media_type: templates.MediaType = Form("document", alias="mediaType"),
    relay: RelayContext = Depends(get_relay),
) -> Any:
    """Upload a PDF or image; the returned media id feeds /api/send-media."""
    content = file.file.read()
    if not content:
        return _bad_request("Uploaded file is empty")

    mime_type = file.content_type
    if not mime_type or mime_type == "application/octet-stream":
        mime_type = templates.MEDIA_MIME_TYPES[media_type]
    try:
        media_id = relay.whatsapp.upload_media(content, file.filename or "upload", mime_type)
    except ProviderError as e:
        logger.warning(
            "media upload failed",
            extra={"extra_fields": safe_log_context(status_code=e.status_code)},
        )
        return JSONResponse(status_code=e.status_code or 500, content={"error": e.body})

    return {"mediaId": media_id}


@router.post("/send-media")
def send_media(
    body: SendMediaRequest,
    relay: RelayContext = Depends(get_relay),
) -> Any:
    if error := _numbers_error(body.phone_numbers):
        return error
    components = templates.media_components(
        media_type=body.media_type,
        media_id=body.media_id,
        filename=body.filename,
    )
    return _bulk_template(
        relay,
        body.phone_numbers,
        name=body.template_name or templates.MEDIA_TEMPLATES[body.media_type],
        language_code=body.language_code,
        components=components,
    )


@router.get("/rsvp-status")
def rsvp_status(relay: RelayContext = Depends(get_relay)) -> dict:
    """Snapshot of the last reply received from each number."""
    return {"rsvpResponses": relay.replies.all()}
