"""
docvault/naming/unique_name.py

Derives collision-free storage keys from sanitized display names.

Key format:

    {millisecond-timestamp}-{hex-salt}-{sanitized-name}
    1718035200123-9f3a0c41-Resume (final).pdf

Uniqueness is probabilistic: the 32-bit salt makes two uploads landing in
the same millisecond collide with negligible probability. Keys are never
checked against the store and there is no retry on collision; the
filesystem blob store opens files in exclusive-create mode, so a collision
fails the upload instead of overwriting another document.
"""

from __future__ import annotations

import secrets
import time
from typing import Callable

from docvault.core.constants import SALT_BITS


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _random_salt() -> str:
    return secrets.token_hex(SALT_BITS // 8)


class UniqueNameGenerator:
    """Prefixes sanitized names with a timestamp and a random salt."""

    def __init__(
        self,
        clock: Callable[[], int] | None = None,
        salt: Callable[[], str] | None = None,
    ) -> None:
        self._clock = clock or _now_ms
        self._salt = salt or _random_salt

    def generate(self, sanitized_name: str) -> str:
        """Return a storage key for an already-sanitized name."""
        return f"{self._clock()}-{self._salt()}-{sanitized_name}"
