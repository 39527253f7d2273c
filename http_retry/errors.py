"""Exception types raised by the retrying executors."""

from __future__ import annotations

import httpx


class HttpRetryError(Exception):
    """Base class for errors raised by :mod:`http_retry`."""


class RetriesExhaustedError(HttpRetryError):
    """Raised when every attempt for a request failed.

    Only the request identity and the number of attempts are kept; the
    individual transport errors and 5xx responses are reported through logging.
    """

    def __init__(self, method: str, url: str, attempts: int) -> None:
        self.method = method
        self.url = url
        self.attempts = attempts
        super().__init__("http request failed after retries")


class RequestBodyError(httpx.TransportError):
    """Raised while sending a request body that could not be buffered.

    Subclassing the httpx transport errors makes the failed attempt retryable
    like any other network failure.
    """
