"""Outbound calls via the Exotel Voice API (Calls/connect).

Exotel's response (status and body) is returned as-is so the console can
show exactly what the provider said.
"""

from relaydesk.observability.logging import get_logger, hash_identifier
from relaydesk.observability.redaction import safe_log_context
from relaydesk.providers import ProviderError, ProviderResponse, do_post

logger = get_logger(__name__)

EXOTEL_BASE_URL = "https://api.exotel.com/v1"


def connect_call(
    *,
    account_sid: str,
    username: str,
    password: str,
    from_number: str,
    to_number: str,
    caller_id: str,
) -> ProviderResponse:
    """Connect ``from_number`` to ``to_number`` through ``caller_id``.

    Calls are recorded (``Record=true``). Credentials are the Exotel API
    key and token supplied by the operator, sent as HTTP basic auth.

    Returns:
        The provider response for any HTTP status.

    Raises:
        ProviderError: No account SID configured, or no HTTP response.
    """
    if not account_sid:
        raise ProviderError(None, {"error": "EXOTEL_ACCOUNT_SID not configured"})

    url = f"{EXOTEL_BASE_URL}/Accounts/{account_sid}/Calls/connect"
    form = {
        "From": from_number,
        "To": to_number,
        "CallerId": caller_id,
        "Record": "true",
    }

    log_ctx = safe_log_context(
        from_hash=hash_identifier(from_number),
        to_hash=hash_identifier(to_number),
        provider="exotel",
    )
    logger.info("connecting call via exotel", extra={"extra_fields": log_ctx})

    try:
        response = do_post(url, data=form, auth=(username, password))
    except ProviderError:
        logger.error("exotel call request failed", extra={"extra_fields": log_ctx})
        raise

    logger.info(
        "exotel call request answered",
        extra={"extra_fields": {**log_ctx, **safe_log_context(status_code=response.status_code)}},
    )
    return response
