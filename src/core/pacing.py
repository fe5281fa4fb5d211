"""
Paced request queue.

Callers submit() and get a future that resolves once the minimum interval
since the previous release has passed. A single background task drains the
queue in FIFO order; resolve_all()/reject_all() settle whatever is still queued.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Mapping, Optional, TypeVar, Union

import config
from core.errors import RequestRejected
from core.models import LimiterSpec

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PacedQueue:
    """Release queued requests one at a time, at most one per interval.

    Purpose:
      - submit() -> Future[None] that resolves when the caller may proceed
      - resolve_all(value) / reject_all(error) settle every queued request

    Key behavior:
      - Strict FIFO release order.
      - One pacing task at most; it sleeps, re-checks, releases the head and
        loops until the queue is empty.
      - Bulk settling never cancels a sleeping pacing task; it wakes to an
        empty queue and goes idle.
    """

    def __init__(self, *, tasks_per_millisecond: float) -> None:
        self._spec = LimiterSpec(tasks_per_millisecond=tasks_per_millisecond)
        self._interval = self._spec.interval_seconds

        # None means no prior release, so the first request goes out immediately.
        self._last_release: Optional[float] = None

        self._queue: Deque["asyncio.Future[Any]"] = deque()

        # Single-flight marker: submit() only starts a task when this is None.
        self._pacer: Optional["asyncio.Task[None]"] = None

    @classmethod
    def from_specs(cls, specs: Mapping[str, Any]) -> "PacedQueue":
        spec = LimiterSpec.from_mapping(specs)
        return cls(tasks_per_millisecond=spec.tasks_per_millisecond)

    @classmethod
    def from_env(cls) -> "PacedQueue":
        return cls(tasks_per_millisecond=config.PACED_INTERVAL_MS)

    @property
    def interval_ms(self) -> float:
        return self._spec.tasks_per_millisecond

    @property
    def pending(self) -> int:
        return sum(1 for fut in self._queue if not fut.done())

    @property
    def is_pacing(self) -> bool:
        return self._pacer is not None

    # --- public API ---

    def submit(self) -> "asyncio.Future[Any]":
        """Queue a request and return a future resolved when it is released."""
        fut = asyncio.get_running_loop().create_future()
        self._queue.append(fut)
        self._kick()
        return fut

    async def run(
        self,
        func: Callable[..., Union[T, Awaitable[T]]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Wait for a release slot, then call `func` (awaiting it if needed)."""
        await self.submit()
        result = func(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    def resolve_all(self, value: Any = None) -> None:
        drained = self._drain()
        for fut in drained:
            fut.set_result(value)
        logger.info("resolve all | count=%s", len(drained))

    def reject_all(self, error: Any) -> None:
        exc = self._rejection(error)
        drained = self._drain()
        for fut in drained:
            fut.set_exception(exc)
        logger.info("reject all | count=%s error=%r", len(drained), error)

    @staticmethod
    def _rejection(error: Any) -> BaseException:
        # Futures only take exception instances, and asyncio refuses StopIteration
        if isinstance(error, BaseException) and not isinstance(error, StopIteration):
            return error
        return RequestRejected(error)

    # --- pacing ---

    def _kick(self) -> None:
        # No-op when a task is already pacing or nothing is queued
        if self._pacer is not None or not self._queue:
            return
        self._pacer = asyncio.get_running_loop().create_task(self._pace())
        logger.debug("pacer start | pending=%s interval_ms=%s", len(self._queue), self.interval_ms)

    async def _pace(self) -> None:
        try:
            while self._prune():
                delay = self._wait_seconds(time.monotonic())
                if delay > 0:
                    await asyncio.sleep(delay)
                self._release_head(time.monotonic())
        finally:
            self._pacer = None
            logger.debug("pacer idle")

    def _wait_seconds(self, now: float) -> float:
        if self._last_release is None:
            return 0.0
        return self._interval - (now - self._last_release)

    def _release_head(self, now: float) -> None:
        # Queue may have been drained in bulk while we slept
        if not self._prune():
            return

        if self._last_release is not None and now - self._last_release < self._interval:
            logger.debug("release skipped | elapsed=%.6f", now - self._last_release)
            return

        self._last_release = now
        self._queue.popleft().set_result(None)
        logger.debug("release | pending=%s", len(self._queue))

    def _prune(self) -> bool:
        # Futures cancelled by their callers leave without using a slot
        while self._queue and self._queue[0].done():
            self._queue.popleft()
        return bool(self._queue)

    def _drain(self) -> list:
        drained = [fut for fut in self._queue if not fut.done()]
        self._queue.clear()
        return drained
