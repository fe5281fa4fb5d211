"""Async HTTP client whose every request waits for a paced release slot.

Wraps httpx.AsyncClient: each attempt first awaits `SlotSource.submit()`
(normally a `core.pacing.PacedQueue`), then sends the request. Explicit
server throttling (Retry-After on 429/503) triggers a bounded sleep and a
retry that queues for a new slot.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

import httpx

import config
from core.errors import ExternalServiceError
from core.interfaces import SlotSource
from core.pacing import PacedQueue

from .throttle import throttle_delay

logger = logging.getLogger(__name__)


class PacedHttpClient:
    """Async HTTP client gated by a shared pacing queue.

    Purpose:
      - request(method, url, **kwargs) -> httpx.Response (2xx only)
      - get / post shortcuts

    Key behavior:
      - One paced slot per attempt, so retries respect the same cadence.
      - Transport errors and non-2xx final responses raise ExternalServiceError.
      - Use as an async context manager, or call aclose() when done.
    """

    def __init__(
        self,
        *,
        pacer: Optional[SlotSource] = None,
        base_url: str = "",
        headers: Optional[Mapping[str, str]] = None,
        timeout: float = config.HTTP_TIMEOUT,
        verify: bool = config.HTTP_VERIFY,
        max_retries: int = config.HTTP_MAX_RETRIES,
        max_retry_sleep: float = config.HTTP_MAX_RETRY_SLEEP,
    ) -> None:
        self._pacer = pacer or PacedQueue.from_env()
        self._base_url = (base_url or "").rstrip("/")
        self._headers = dict(headers or {})
        self._timeout = float(timeout)
        self._verify = bool(verify)
        self._max_retries = max(0, int(max_retries))
        self._max_retry_sleep = float(max_retry_sleep)

        self._client = self._create_client()

    async def __aenter__(self) -> "PacedHttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        attempts = self._max_retries + 1

        for attempt in range(attempts):
            # Wait for our turn in the shared cadence
            await self._pacer.submit()

            try:
                resp = await self._client.request(method, url, **kwargs)
            except httpx.HTTPError as e:
                raise ExternalServiceError(f"{method} {url} failed: {e}") from e

            if attempt < attempts - 1:
                delay = throttle_delay(resp, max_sleep_seconds=self._max_retry_sleep)
                if delay is not None:
                    logger.warning(
                        "throttled | method=%s url=%s status=%s retry_in=%.2f attempt=%s",
                        method,
                        url,
                        resp.status_code,
                        delay,
                        attempt + 1,
                    )
                    await asyncio.sleep(delay)
                    continue

            try:
                resp.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise ExternalServiceError(f"{method} {url} returned an error: {e}") from e
            return resp

        raise RuntimeError("Unreachable: request did not return a response")

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
            verify=self._verify,
        )
