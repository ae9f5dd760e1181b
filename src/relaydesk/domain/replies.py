"""Last-known RSVP reply per number."""

import threading

from .phone import normalize


class ReplyStore:
    """Maps a normalized number to the most recent reply text.

    Last write wins. No history, timestamps or expiry.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._replies: dict[str, str] = {}

    def record(self, number: str, text: str) -> None:
        key = normalize(number)
        if not key:
            return
        with self._lock:
            self._replies[key] = text

    def all(self) -> dict[str, str]:
        """Copy of every recorded reply."""
        with self._lock:
            return dict(self._replies)
