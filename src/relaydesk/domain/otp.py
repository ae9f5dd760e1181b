"""One-time passcodes sent over WhatsApp for phone verification."""

import hmac
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from .phone import normalize

OTP_DIGITS = 6


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_code() -> str:
    """Random 6-digit code, never starting with 0."""
    return str(100000 + secrets.randbelow(900000))


@dataclass(frozen=True)
class IssuedCode:
    code: str
    expires_at: datetime


class OtpStore:
    """Pending codes keyed by normalized number.

    Issuing a new code replaces the previous one. A code verifies at most
    once and never after ``expires_at``.
    """

    def __init__(self, ttl_seconds: int, clock: Callable[[], datetime] = utc_now) -> None:
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._codes: dict[str, IssuedCode] = {}

    def issue(self, number: str, code: str) -> IssuedCode:
        key = normalize(number)
        if not key:
            raise ValueError("phone number is empty after normalization")
        issued = IssuedCode(code=code, expires_at=self._clock() + self._ttl)
        with self._lock:
            self._codes[key] = issued
        return issued

    def verify(self, number: str, code: str) -> bool:
        """Check and consume a code. Expired codes are dropped on access."""
        key = normalize(number)
        with self._lock:
            issued = self._codes.get(key)
            if issued is None:
                return False
            if self._clock() >= issued.expires_at:
                del self._codes[key]
                return False
            if not hmac.compare_digest(issued.code.encode(), code.encode()):
                return False
            del self._codes[key]
            return True
