"""Redaction helpers. Every extra field attached to a log record goes through here."""

import re
from typing import Any

# Phone numbers (with or without "+", spaces, dashes) and e-mail addresses
_PHONE_PATTERN = re.compile(r"\+?\d[\d\s\-()]{8,}\d")
_EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

_REDACTED = "[REDACTED]"

_HASH_SUFFIX = "_hash"


def redact_string(value: str) -> str:
    result = _PHONE_PATTERN.sub(_REDACTED, value)
    return _EMAIL_PATTERN.sub(_REDACTED, result)


def redact_value(value: Any) -> str:
    """Render a value for logging without leaking its content.

    Mappings are reduced to their keys and sequences to their length, so a
    request body or provider payload can be logged structurally.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, dict):
        return f"dict(keys={sorted(str(k) for k in value)})"
    if isinstance(value, (list, tuple, set)):
        return f"list(len={len(value)})"
    return f"<{type(value).__name__}>"


def safe_log_context(**fields: Any) -> dict[str, str]:
    """Redact every field except ``*_hash`` strings.

    Those already hold ``hash_identifier`` output, and a digit-heavy hash
    would otherwise match the phone pattern.
    """
    return {
        key: value if key.endswith(_HASH_SUFFIX) and isinstance(value, str) else redact_value(value)
        for key, value in fields.items()
    }
