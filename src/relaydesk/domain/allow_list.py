"""Allow-list of numbers whose inbound replies are acted on.

A number joins the list when we message it successfully and stays for the
lifetime of the process. There is no removal.
"""

import threading

from .phone import normalize


class AllowList:
    """Thread-safe set of normalized phone numbers.

    Sync route handlers run in a thread pool, so membership changes are
    guarded by a lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # dict keeps insertion order for snapshot()
        self._numbers: dict[str, None] = {}

    def add(self, number: str) -> bool:
        """Add a number. Returns False if it normalizes to an empty string."""
        key = normalize(number)
        if not key:
            return False
        with self._lock:
            self._numbers[key] = None
        return True

    def contains(self, number: str) -> bool:
        key = normalize(number)
        if not key:
            return False
        with self._lock:
            return key in self._numbers

    def snapshot(self) -> list[str]:
        with self._lock:
            return list(self._numbers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._numbers)
