"""Phone number normalization.

Every in-memory lookup (allow-list, replies, OTP codes) is keyed by the
normalized form, so "+91 98765 43210" and "919876543210" hit the same entry.
"""

import re
from typing import Any

_WHITESPACE = re.compile(r"\s+")


def normalize(raw: Any) -> str:
    """Strip all whitespace and the leading "+".

    A run of leading "+" is removed as a whole, so normalizing twice gives
    the same result as normalizing once. Never raises: anything that is not
    a string normalizes to "".
    """
    if not isinstance(raw, str):
        return ""
    return _WHITESPACE.sub("", raw).lstrip("+")
