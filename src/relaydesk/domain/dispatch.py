"""Sequential bulk dispatch.

A bulk send is a fold over the recipient list: each raw number is
normalized, sent to one at a time, and turned into a Sent or Failed result.
Results keep input order. One recipient's failure never stops the rest.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Union

from relaydesk.observability.logging import get_logger, hash_identifier
from relaydesk.observability.redaction import safe_log_context
from relaydesk.providers import ProviderError

from .allow_list import AllowList
from .phone import normalize

logger = get_logger(__name__)


@dataclass(frozen=True)
class Sent:
    number: str
    message_id: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"number": self.number, "success": True, "messageId": self.message_id}


@dataclass(frozen=True)
class Failed:
    number: str
    error: Any

    def to_dict(self) -> dict[str, Any]:
        return {"number": self.number, "success": False, "error": self.error}


DispatchResult = Union[Sent, Failed]

# Sends one message to a normalized number, returns the provider message id
SendFn = Callable[[str], str | None]


def dispatch(
    raw_numbers: Iterable[Any],
    send: SendFn,
    allow_list: AllowList | None = None,
) -> list[DispatchResult]:
    """Send to every number in order and collect one result per attempt.

    Numbers that normalize to "" are skipped without a result. When
    ``allow_list`` is given, a number is added to it only after its send
    succeeded.
    """
    results: list[DispatchResult] = []

    for raw in raw_numbers:
        number = normalize(raw)
        if not number:
            continue

        try:
            provider_message_id = send(number)
        except ProviderError as e:
            logger.warning(
                "dispatch to recipient failed",
                extra={
                    "extra_fields": safe_log_context(
                        to_hash=hash_identifier(number),
                        status_code=e.status_code,
                    )
                },
            )
            results.append(Failed(number=number, error=e.body))
            continue

        if allow_list is not None:
            allow_list.add(number)
        results.append(Sent(number=number, message_id=provider_message_id))

    logger.info(
        "dispatch batch finished",
        extra={
            "extra_fields": safe_log_context(
                attempted=len(results),
                succeeded=sum(1 for r in results if isinstance(r, Sent)),
            )
        },
    )
    return results


def summarize(results: list[DispatchResult], allow_list: AllowList) -> dict[str, Any]:
    """Response body shared by every bulk send endpoint."""
    return {
        "success": True,
        "sent": len(results),
        "autoReplyEnabledFor": allow_list.snapshot(),
        "results": [r.to_dict() for r in results],
    }
