from __future__ import annotations

from typing import Any


class PacedQueueError(Exception):
    """Base error for the paced queue package."""


class ConfigurationError(PacedQueueError, TypeError):
    """Raised when a limiter is constructed with an invalid interval."""


class RequestRejected(PacedQueueError):
    """Raised from a queued request that was failed in bulk with a plain value."""

    def __init__(self, reason: Any) -> None:
        super().__init__(f"Request rejected: {reason!r}")
        self.reason = reason


class ExternalServiceError(PacedQueueError):
    """Raised when a paced HTTP call fails."""
