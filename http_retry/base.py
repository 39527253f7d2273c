"""Configuration and retry hooks shared by the sync and async executors."""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Dict, Optional

import httpx
from tenacity import (
    RetryCallState,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
)

from .body import restore_request_body
from .dump import dump_request
from .errors import RetriesExhaustedError
from .logging_setup import TRACE
from .options import ExecutorOption
from .retry import (
    DEFAULT_BACKOFF_SECONDS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
    RETRYABLE_EXCEPTIONS,
    LinearBackoff,
    attempt_index,
    is_server_error,
)

logger = logging.getLogger("http_retry.executor")


def _log_attempt(request: httpx.Request, retry_state: RetryCallState) -> None:
    logger.log(
        TRACE,
        "HTTP request",
        extra={"attempt": attempt_index(retry_state), "url": str(request.url)},
    )


def _log_failed_attempt(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    error = outcome.exception() if outcome is not None else None
    fields: Dict[str, Any] = {
        "attempt": attempt_index(retry_state),
        "error": repr(error) if error is not None else None,
    }
    # An attempt that raised has no response to inspect.
    if outcome is not None and error is None:
        response = outcome.result()
        fields["status_code"] = response.status_code
        fields["reason_phrase"] = response.reason_phrase
    logger.warning("HTTP request error", extra=fields)


class BaseRetryingExecutor:
    """Holds executor configuration and builds the tenacity retry policy."""

    def __init__(self, *options: ExecutorOption) -> None:
        self.max_retries: int = DEFAULT_MAX_RETRIES
        self.backoff: float = DEFAULT_BACKOFF_SECONDS
        self.timeout: float = DEFAULT_TIMEOUT_SECONDS
        self.client: Any = None
        self._owns_client = False
        self._configuring = True
        self.sleeper = self._default_sleeper()
        for option in options:
            option(self)
        self._configuring = False
        # Built after the options so a replaced default is never created.
        if self.client is None:
            self._set_client(self._build_client(self.timeout), owned=True)

    def _set_client(self, client: Any, *, owned: bool) -> None:
        previous, owned_previous = self.client, self._owns_client
        self.client = client
        self._owns_client = owned
        if owned_previous and previous is not None and previous is not client:
            self._release_client(previous)

    def _reset_client(self) -> None:
        """Rebuild the client for the current timeout.

        While options are being applied the build is deferred to the end of
        construction.
        """
        if self._configuring:
            self._set_client(None, owned=False)
        else:
            self._set_client(self._build_client(self.timeout), owned=True)

    def _release_client(self, client: Any) -> None:
        raise NotImplementedError

    def _build_client(self, timeout: float) -> Any:
        raise NotImplementedError

    def _default_sleeper(self) -> Any:
        raise NotImplementedError

    def _retry_policy(
        self, request: httpx.Request, body: Optional[bytes]
    ) -> Dict[str, Any]:
        def after_failed_attempt(retry_state: RetryCallState) -> None:
            _log_failed_attempt(retry_state)
            restore_request_body(request, body)

        return {
            "stop": stop_after_attempt(self.max_retries),
            "wait": LinearBackoff(self.backoff),
            "retry": (
                retry_if_exception_type(RETRYABLE_EXCEPTIONS)
                | retry_if_result(is_server_error)
            ),
            "before": partial(_log_attempt, request),
            "after": after_failed_attempt,
        }

    def _final_delay(self, retry_state: RetryCallState) -> float:
        return LinearBackoff(self.backoff)(retry_state)

    def _exhausted_error(
        self, request: httpx.Request, retry_state: RetryCallState
    ) -> RetriesExhaustedError:
        try:
            dump = dump_request(request)
        except (httpx.StreamError, UnicodeError):
            logger.info(
                "Max retry limit for request. Also failed to print the request",
                extra={"request": request},
            )
        else:
            logger.info("Max retry limit for request", extra={"request": dump})
        return RetriesExhaustedError(
            request.method, str(request.url), retry_state.attempt_number
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(max_retries={self.max_retries}, "
            f"backoff={self.backoff}, timeout={self.timeout})"
        )
