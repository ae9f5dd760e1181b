"""Shared HTTP plumbing for provider calls (WhatsApp Graph API, Exotel).

One request per call, no retry. Callers decide whether a non-2xx response
is an error (WhatsApp sends) or something to relay verbatim (Exotel).
"""

from dataclasses import dataclass
from typing import Any

import requests

# Timeout for provider HTTP requests (seconds)
HTTP_TIMEOUT = 15


class ProviderError(Exception):
    """Upstream provider call failed.

    ``status_code`` is None for failures that never produced an HTTP
    response (connection errors, timeouts, missing credentials).
    ``body`` is the provider's parsed JSON body when there is one, else its
    raw text, else the failure message.
    """

    def __init__(self, status_code: int | None, body: Any) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"provider error (status={status_code})")


@dataclass(frozen=True)
class ProviderResponse:
    status_code: int
    content_type: str
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def _parse_body(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


def do_post(url: str, **kwargs: Any) -> ProviderResponse:
    """POST to a provider and return its response whatever the status.

    Raises:
        ProviderError: The request never got an HTTP response.
    """
    kwargs.setdefault("timeout", HTTP_TIMEOUT)
    try:
        resp = requests.post(url, **kwargs)
    except requests.RequestException as e:
        raise ProviderError(None, {"error": str(e)}) from e

    return ProviderResponse(
        status_code=resp.status_code,
        content_type=resp.headers.get("Content-Type", ""),
        body=_parse_body(resp),
    )


def post_json_or_raise(url: str, **kwargs: Any) -> Any:
    """POST and return the parsed body of a 2xx response.

    Raises:
        ProviderError: Network failure or non-2xx status.
    """
    response = do_post(url, **kwargs)
    if not response.ok:
        raise ProviderError(response.status_code, response.body)
    return response.body
