"""Shared retry/backoff configuration and the linear backoff schedule."""

from __future__ import annotations

from typing import Any

import httpx
from tenacity import RetryCallState
from tenacity.wait import wait_base

DEFAULT_MAX_RETRIES: int = 3
DEFAULT_BACKOFF_SECONDS: int = 2
DEFAULT_TIMEOUT_SECONDS: float = 30.0

SERVER_ERROR_THRESHOLD = 500

# Includes RequestBodyError, raised for bodies that could not be buffered.
RETRYABLE_EXCEPTIONS = (httpx.HTTPError,)


def is_server_error(response: Any) -> bool:
    """Return ``True`` when *response* carries a 5xx status."""

    status_code = getattr(response, "status_code", None)
    return status_code is not None and status_code >= SERVER_ERROR_THRESHOLD


def attempt_index(retry_state: RetryCallState) -> int:
    """Zero-based index of the attempt that just finished."""

    return retry_state.attempt_number - 1


class LinearBackoff(wait_base):
    """Wait ``attempt_index * unit`` seconds after a failed attempt.

    The first failed attempt therefore waits zero seconds.
    """

    def __init__(self, unit: float) -> None:
        self.unit = unit

    def __call__(self, retry_state: RetryCallState) -> float:
        return float(attempt_index(retry_state) * self.unit)
