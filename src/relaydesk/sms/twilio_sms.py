"""SMS via Twilio, with credentials supplied per request by the operator."""

from twilio.rest import Client

from relaydesk.observability.logging import get_logger, hash_identifier
from relaydesk.observability.redaction import safe_log_context

logger = get_logger(__name__)


def send_sms(*, account_sid: str, auth_token: str, to: str, from_: str, body: str) -> str:
    """Send one SMS and return the Twilio message SID.

    Raises:
        twilio.base.exceptions.TwilioException: Any Twilio failure, unchanged.
    """
    client = Client(account_sid, auth_token)

    log_ctx = safe_log_context(to_hash=hash_identifier(to), text_len=len(body), provider="twilio")
    logger.info("sending sms via twilio", extra={"extra_fields": log_ctx})

    message = client.messages.create(to=to, from_=from_, body=body)

    logger.info("sms accepted by twilio", extra={"extra_fields": log_ctx})
    return message.sid
