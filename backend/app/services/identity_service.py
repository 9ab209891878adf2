"""
Naviga8 Backend - Anonymous Identifier Issuer
===============================================

What:  Hands out the anonymous user ids the map client stores locally.
How:   9 random base-36 characters followed by the current time in
       milliseconds, also base 36 (e.g. "k3j9x0q2ame1m2v8q4z").
Who:   Called by GET /api/user-id.

Stateless: nothing is persisted and uniqueness is not checked. The id only
scopes route ownership; it is not a credential, and anyone who knows it can
read and delete that user's routes.
"""

import secrets
import string
import time
from typing import Callable, Optional

BASE36_ALPHABET = string.digits + string.ascii_lowercase
RANDOM_PART_LENGTH = 9


def to_base36(value: int) -> str:
    """Lowercase base-36 rendering of a non-negative integer."""
    if value < 0:
        raise ValueError("to_base36() expects a non-negative integer")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


class IdentityService:
    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time

    def generate_user_id(self) -> str:
        random_part = "".join(
            secrets.choice(BASE36_ALPHABET) for _ in range(RANDOM_PART_LENGTH)
        )
        millis = int(self._clock() * 1000)
        return random_part + to_base36(millis)


identity_service = IdentityService()
