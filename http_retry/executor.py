"""Synchronous HTTP executor with retry and linear backoff."""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx
from tenacity import RetryCallState, Retrying

from .base import BaseRetryingExecutor
from .body import buffer_request_body
from .sleepers import TimeSleeper


class RetryingExecutor(BaseRetryingExecutor):
    """Wrapper around :class:`httpx.Client` that retries transient failures.

    Transport errors and 5xx responses are retried up to ``max_retries``
    attempts in total, waiting ``attempt_index * backoff`` seconds after each
    failed attempt. Any response below 500 is returned as-is.

    Example:
        >>> executor = RetryingExecutor(with_retries(5), with_timeout(10))
        >>> response = executor.get("https://api.example.com/items")
    """

    def _build_client(self, timeout: float) -> httpx.Client:
        return httpx.Client(timeout=timeout)

    def _default_sleeper(self) -> TimeSleeper:
        return TimeSleeper()

    def _release_client(self, client: httpx.Client) -> None:
        client.close()

    def execute(self, request: httpx.Request) -> httpx.Response:
        """Send *request*, retrying transport errors and 5xx responses.

        Raises:
            RetriesExhaustedError: every attempt failed.
        """

        body = buffer_request_body(request)

        def exhausted(retry_state: RetryCallState) -> None:
            self.sleeper.sleep(self._final_delay(retry_state))
            raise self._exhausted_error(request, retry_state)

        retrying = Retrying(
            sleep=self.sleeper.sleep,
            retry_error_callback=exhausted,
            **self._retry_policy(request, body),
        )
        return retrying(self.client.send, request)

    def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        content: Optional[Any] = None,
        data: Optional[Any] = None,
        json: Optional[Any] = None,
    ) -> httpx.Response:
        request = self.client.build_request(
            method,
            url,
            params=params,
            headers=headers,
            content=content,
            data=data,
            json=json,
        )
        return self.execute(request)

    def get(self, url: str, **kw: Any) -> httpx.Response:
        return self.request("GET", url, **kw)

    def post(self, url: str, **kw: Any) -> httpx.Response:
        return self.request("POST", url, **kw)

    def put(self, url: str, **kw: Any) -> httpx.Response:
        return self.request("PUT", url, **kw)

    def patch(self, url: str, **kw: Any) -> httpx.Response:
        return self.request("PATCH", url, **kw)

    def delete(self, url: str, **kw: Any) -> httpx.Response:
        return self.request("DELETE", url, **kw)

    def close(self) -> None:
        """Close the client if this executor built it."""

        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "RetryingExecutor":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
