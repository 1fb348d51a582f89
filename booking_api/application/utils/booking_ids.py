from __future__ import annotations

import secrets
import string
import time

BOOKING_ID_PREFIX = "4EV"
SUFFIX_LENGTH = 4

_BASE36_ALPHABET = string.digits + string.ascii_uppercase


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_booking_id(now_ms: int | None = None) -> str:
    """Return an id like 4EV-MF3K2J1A-X7QZ: prefix, base-36 ms timestamp, random suffix.

    Uniqueness is probabilistic: two ids minted in the same millisecond
    only differ by the random suffix.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{BOOKING_ID_PREFIX}-{to_base36(now_ms)}-{suffix}"
