"""Unit tests for the asynchronous retrying executor."""

from __future__ import annotations

import logging

import httpx
import pytest

from http_retry import (
    AsyncioSleeper,
    AsyncRetryingExecutor,
    RetriesExhaustedError,
    with_client,
    with_retries,
    with_sleeper,
    with_timeout,
)

pytestmark = pytest.mark.asyncio

URL = "https://api.example.com/items"


def _executor(handler, sleeper, *options):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AsyncRetryingExecutor(with_client(client), with_sleeper(sleeper), *options)


async def test_async_success_makes_single_attempt(scripted, async_recording_sleeper):
    handler = scripted([200])
    executor = _executor(handler, async_recording_sleeper)

    response = await executor.get(URL)

    assert response.status_code == 200
    assert handler.calls == 1
    assert async_recording_sleeper.calls == []


async def test_async_exhaustion_follows_linear_schedule(
    scripted, async_recording_sleeper, caplog
):
    handler = scripted([503])
    executor = _executor(handler, async_recording_sleeper)

    with caplog.at_level(logging.INFO, logger="http_retry.executor"):
        with pytest.raises(RetriesExhaustedError) as excinfo:
            await executor.post(URL, content=b"body")

    assert handler.calls == 3
    assert excinfo.value.attempts == 3
    assert async_recording_sleeper.calls == [0, 2, 4]
    assert any(r.message == "Max retry limit for request" for r in caplog.records)


async def test_async_retries_resend_buffered_stream(scripted, async_recording_sleeper):
    async def chunks():
        yield b"first,"
        yield b"second"

    handler = scripted([httpx.ConnectError("reset"), 500, 200])
    executor = _executor(handler, async_recording_sleeper, with_retries(4))

    response = await executor.execute(httpx.Request("POST", URL, content=chunks()))

    assert response.status_code == 200
    assert handler.bodies == [b"first,second"] * 3
    assert async_recording_sleeper.calls == [0, 2]


async def test_async_client_error_is_terminal(scripted, async_recording_sleeper):
    handler = scripted([422])
    executor = _executor(handler, async_recording_sleeper)

    response = await executor.delete(URL)

    assert response.status_code == 422
    assert handler.calls == 1


async def test_async_defaults_and_timeout_override():
    executor = AsyncRetryingExecutor(with_retries(6), with_timeout(4.5))

    assert isinstance(executor.client, httpx.AsyncClient)
    assert executor.client.timeout == httpx.Timeout(4.5)
    assert executor.max_retries == 6
    assert isinstance(executor.sleeper, AsyncioSleeper)

    async with executor:
        pass
    assert executor.client.is_closed


async def test_async_shared_client_is_left_open():
    client = httpx.AsyncClient()
    async with AsyncRetryingExecutor(with_client(client)):
        pass

    assert not client.is_closed
    await client.aclose()


class FailingAsyncStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        yield b"part"
        raise OSError("device error")


async def test_async_failing_body_stream_is_retried_without_body(
    scripted, async_recording_sleeper, caplog
):
    handler = scripted([200])
    executor = _executor(handler, async_recording_sleeper)

    with caplog.at_level(logging.WARNING, logger="http_retry"):
        response = await executor.execute(
            httpx.Request("POST", URL, stream=FailingAsyncStream())
        )

    assert response.status_code == 200
    assert handler.bodies == [b""]
    assert async_recording_sleeper.calls == [0]
    assert any(
        "Unable to read body from request" in r.message for r in caplog.records
    )


async def test_async_failing_body_stream_exhausts_instead_of_escaping(
    scripted, async_recording_sleeper
):
    handler = scripted([200])
    executor = _executor(handler, async_recording_sleeper, with_retries(1))

    with pytest.raises(RetriesExhaustedError):
        await executor.execute(
            httpx.Request("POST", URL, stream=FailingAsyncStream())
        )

    assert handler.calls == 0
    assert async_recording_sleeper.calls == [0]
