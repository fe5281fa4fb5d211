"""Core protocol definitions.

Defines the SlotSource protocol: anything that hands out awaitable release
slots. PacedQueue implements it; the paced HTTP client depends only on it.
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol


class SlotSource(Protocol):
    """Contract for a pacing primitive that releases callers one at a time."""
    def submit(self) -> "asyncio.Future[Any]":
        ...
