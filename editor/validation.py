"""
Level name validation.
"""

from __future__ import annotations

import string

_ALLOWED = frozenset(string.ascii_letters + string.digits)


def is_valid_level_name(candidate: str | None) -> bool:
    """
    Check whether a typed level name may be saved.

    Only non-empty ASCII letters and digits are accepted, which keeps the
    name usable as a file stem. The whole string is checked every call.
    """
    if not candidate:
        return False
    return all(char in _ALLOWED for char in candidate)
