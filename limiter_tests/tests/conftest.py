import asyncio

import pytest

import core.pacing as pacing_mod


class FakeClock:
    """Deterministic stand-in for time.monotonic + asyncio.sleep.

    sleep() records the request, yields once to the event loop so other
    tasks can run mid-wait, then advances the clock by the requested amount minus any queued
    shortfall.
    """

    def __init__(self, real_sleep, start: float = 0.0) -> None:
        self.now = start
        self.sleeps = []
        # Per-sleep amounts by which the clock falls short of the request
        self.shortfalls = []
        self._real_sleep = real_sleep

    def monotonic(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        await self._real_sleep(0)
        short = self.shortfalls.pop(0) if self.shortfalls else 0.0
        self.now += seconds - short

    async def tick(self, n: int = 3) -> None:
        # Let pending tasks run without touching the clock
        for _ in range(n):
            await self._real_sleep(0)


@pytest.fixture
def clock(monkeypatch):
    c = FakeClock(asyncio.sleep)
    monkeypatch.setattr(pacing_mod.time, "monotonic", c.monotonic)
    monkeypatch.setattr(pacing_mod.asyncio, "sleep", c.sleep)
    return c
