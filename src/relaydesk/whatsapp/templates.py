"""Outbound message text and template component builders.

Template names must match templates approved on the WhatsApp Business
account; the builders only produce the Graph API ``components`` list.
"""

from typing import Any, Literal

MediaType = Literal["document", "image"]

LOCATION_TEMPLATE = "google_map_template"

MEDIA_TEMPLATES: dict[str, str] = {
    "document": "order_invoice1",
    "image": "promo_image_offer",
}

MEDIA_MIME_TYPES: dict[str, str] = {
    "document": "application/pdf",
    "image": "image/jpeg",
}

ACK_TEMPLATE = 'Thank you for your response: "{reply}". We\'ll contact you shortly.'


def acknowledgement_text(reply: str) -> str:
    """Text sent back to a number after its reply was recorded."""
    return ACK_TEMPLATE.format(reply=reply)


def location_components(
    *, latitude: float, longitude: float, name: str, address: str
) -> list[dict[str, Any]]:
    """Header component carrying a location pin."""
    return [
        {
            "type": "header",
            "parameters": [
                {
                    "type": "location",
                    "location": {
                        "latitude": latitude,
                        "longitude": longitude,
                        "name": name,
                        "address": address,
                    },
                }
            ],
        }
    ]


def media_components(
    *, media_type: MediaType, media_id: str, filename: str = "Invoice.pdf"
) -> list[dict[str, Any]]:
    """Header component referencing a previously uploaded media id."""
    if media_type == "document":
        parameter = {"type": "document", "document": {"id": media_id, "filename": filename}}
    elif media_type == "image":
        parameter = {"type": "image", "image": {"id": media_id}}
    else:
        raise ValueError(f"Unsupported media type: {media_type}")
    return [{"type": "header", "parameters": [parameter]}]


def otp_components(code: str) -> list[dict[str, Any]]:
    """Authentication template: code in the body and in the copy-code URL button."""
    return [
        {"type": "body", "parameters": [{"type": "text", "text": code}]},
        {
            "type": "button",
            "sub_type": "url",
            "index": 0,
            "parameters": [{"type": "text", "text": code}],
        },
    ]
