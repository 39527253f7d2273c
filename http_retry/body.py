"""Request-body buffering so a request can be transmitted more than once."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Iterator, Optional

import httpx

from .errors import RequestBodyError

logger = logging.getLogger(__name__)


class _UnbufferedStream(httpx.SyncByteStream):
    """Sends what is left of a body that failed to buffer.

    Errors raised by the underlying stream surface as :class:`RequestBodyError`.
    """

    def __init__(self, stream: Any, request: httpx.Request) -> None:
        self._stream = stream
        self._request = request

    def __iter__(self) -> Iterator[bytes]:
        try:
            yield from self._stream
        except httpx.HTTPError:
            raise
        except Exception as exc:
            raise RequestBodyError(
                f"Unable to send request body: {exc!r}", request=self._request
            ) from exc

    def close(self) -> None:
        close = getattr(self._stream, "close", None)
        if callable(close):
            close()


class _AsyncUnbufferedStream(httpx.AsyncByteStream):
    def __init__(self, stream: Any, request: httpx.Request) -> None:
        self._stream = stream
        self._request = request

    async def __aiter__(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._stream:
                yield chunk
        except httpx.HTTPError:
            raise
        except Exception as exc:
            raise RequestBodyError(
                f"Unable to send request body: {exc!r}", request=self._request
            ) from exc

    async def aclose(self) -> None:
        aclose = getattr(self._stream, "aclose", None)
        if callable(aclose):
            await aclose()


def _in_memory_body(request: httpx.Request) -> Optional[bytes]:
    # httpx keeps bodies given as bytes (and empty bodies) in a ByteStream,
    # which is already replayable; joining it consumes nothing.
    body = request.read()
    return body or None


def buffer_request_body(request: httpx.Request) -> Optional[bytes]:
    """Capture the body of *request* in memory.

    Streaming bodies are read fully, the original stream is closed and the
    request is left carrying a fresh in-memory stream. Returns ``None`` when
    the request has no body or when reading it failed; in the latter case the
    request keeps whatever is left of its stream, and errors it raises while
    being sent are reported as :class:`RequestBodyError`.
    """

    if isinstance(request.stream, httpx.ByteStream):
        return _in_memory_body(request)

    original = request.stream
    try:
        body = request.read()
    except Exception:
        logger.warning(
            "Unable to read body from request",
            exc_info=True,
            extra={"method": request.method, "url": str(request.url)},
        )
        request.stream = _UnbufferedStream(original, request)
        return None

    close = getattr(original, "close", None)
    if callable(close):
        close()
    request.stream = httpx.ByteStream(body)
    return body or None


async def abuffer_request_body(request: httpx.Request) -> Optional[bytes]:
    """Async counterpart of :func:`buffer_request_body`."""

    if isinstance(request.stream, httpx.ByteStream):
        return _in_memory_body(request)

    original = request.stream
    try:
        body = await request.aread()
    except Exception:
        logger.warning(
            "Unable to read body from request",
            exc_info=True,
            extra={"method": request.method, "url": str(request.url)},
        )
        request.stream = _AsyncUnbufferedStream(original, request)
        return None

    aclose = getattr(original, "aclose", None)
    if callable(aclose):
        await aclose()
    request.stream = httpx.ByteStream(body)
    return body or None


def restore_request_body(request: httpx.Request, body: Optional[bytes]) -> None:
    """Prepare *request* for another attempt.

    A buffered body is re-attached as a fresh stream. A request whose body
    could not be buffered is sent without a body from here on.
    """

    if body:
        request.stream = httpx.ByteStream(body)
    elif not isinstance(request.stream, httpx.ByteStream):
        request.stream = httpx.ByteStream(b"")
