"""Test configuration helpers and shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


class RecordingSleeper:
    """Delay source that records requested delays instead of sleeping."""

    def __init__(self) -> None:
        self.calls: List[float] = []

    def sleep(self, seconds: float) -> None:
        self.calls.append(seconds)


class AsyncRecordingSleeper:
    def __init__(self) -> None:
        self.calls: List[float] = []

    async def sleep(self, seconds: float) -> None:
        self.calls.append(seconds)


class ScriptedHandler:
    """MockTransport handler replaying a script of responses and exceptions.

    Each entry is either a status code or an exception instance. Every request
    seen is recorded together with the body bytes streamed for it.
    """

    def __init__(self, script: List[object]) -> None:
        self.script = list(script)
        self.requests: List[httpx.Request] = []
        self.bodies: List[bytes] = []
        self.headers: List[list] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.bodies.append(b"".join(request.stream))
        self.headers.append(list(request.headers.raw))
        step = self.script[min(len(self.requests), len(self.script)) - 1]
        if isinstance(step, BaseException):
            raise step
        return httpx.Response(step, request=request)


@pytest.fixture
def recording_sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def async_recording_sleeper() -> AsyncRecordingSleeper:
    return AsyncRecordingSleeper()


@pytest.fixture
def scripted() -> Callable[[List[object]], ScriptedHandler]:
    """Build a :class:`ScriptedHandler`; the last entry repeats once exhausted."""

    return ScriptedHandler
