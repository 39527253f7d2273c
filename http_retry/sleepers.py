"""Delay sources used between retry attempts."""

from __future__ import annotations

import asyncio
import time
from typing import Protocol


class Sleeper(Protocol):
    def sleep(self, seconds: float) -> None: ...


class AsyncSleeper(Protocol):
    async def sleep(self, seconds: float) -> None: ...


class TimeSleeper:
    """Blocks the calling thread for the requested wall-clock time."""

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class AsyncioSleeper:
    """Suspends the current task for the requested wall-clock time."""

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
