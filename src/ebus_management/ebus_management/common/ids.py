from __future__ import annotations

import random
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Time-ordered record id: base36 millis followed by random base36 noise."""
    return _base36(int(time.time() * 1000)) + _base36(random.getrandbits(52))
