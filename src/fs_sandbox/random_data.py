"""Random payloads for synthetic file contents."""

from __future__ import annotations

import os
import random

from .config import DEFAULT_MAX_BYTES, DEFAULT_MIN_BYTES, SandboxSettings


def generate_random_data(
    min_bytes: int | None = None,
    max_bytes: int | None = None,
    settings: SandboxSettings | None = None,
) -> bytes:
    """Return random bytes whose length is picked uniformly in ``[min_bytes, max_bytes]``.

    Args:
        min_bytes: Smallest payload size (default 5 KiB, or the configured value)
        max_bytes: Largest payload size (default 2000 KiB, or the configured value)
        settings: Optional settings supplying the default bounds

    Raises:
        ValueError: If a bound is negative or ``min_bytes > max_bytes``
    """
    if min_bytes is None:
        min_bytes = settings.min_bytes if settings else DEFAULT_MIN_BYTES
    if max_bytes is None:
        max_bytes = settings.max_bytes if settings else DEFAULT_MAX_BYTES
    if min_bytes < 0 or max_bytes < 0:
        raise ValueError("Byte bounds must not be negative")
    if min_bytes > max_bytes:
        raise ValueError(f"min_bytes ({min_bytes}) is larger than max_bytes ({max_bytes})")

    size = random.randint(min_bytes, max_bytes)
    return os.urandom(size)
