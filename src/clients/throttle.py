"""Interpret server-side throttling signals on HTTP responses.

- 429 and 503 count as throttling only when they carry Retry-After.
- Retry-After may be delta-seconds or an HTTP-date.
- Delays are bounded by the caller's maximum so a bad header can't stall us.
"""

from __future__ import annotations

import time
from email.utils import parsedate_to_datetime
from typing import Mapping, Optional

import httpx


def retry_after_seconds(headers: Mapping[str, str]) -> Optional[float]:
    value = (headers.get("Retry-After") or "").strip()
    if not value:
        return None

    if value.isascii() and value.isdigit():
        return float(value)

    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when is None:
        return None
    return max(0.0, when.timestamp() - time.time())


def throttle_delay(response: httpx.Response, *, max_sleep_seconds: float) -> Optional[float]:
    # Returns seconds to wait before retrying, or None if the response isn't a throttle
    if response.status_code not in (429, 503):
        return None

    delay = retry_after_seconds(response.headers)
    if delay is None:
        return None

    return min(delay, float(max_sleep_seconds))
