"""Asynchronous counterpart of :class:`http_retry.executor.RetryingExecutor`."""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx
from tenacity import AsyncRetrying, RetryCallState

from .base import BaseRetryingExecutor
from .body import abuffer_request_body
from .sleepers import AsyncioSleeper


class AsyncRetryingExecutor(BaseRetryingExecutor):
    """Wrapper around :class:`httpx.AsyncClient` with the same retry policy."""

    def _build_client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout)

    def _default_sleeper(self) -> AsyncioSleeper:
        return AsyncioSleeper()

    def _release_client(self, client: httpx.AsyncClient) -> None:
        # AsyncClient.aclose needs a running loop; options applied at
        # construction never build a client that is later replaced.
        pass

    async def execute(self, request: httpx.Request) -> httpx.Response:
        body = await abuffer_request_body(request)

        async def exhausted(retry_state: RetryCallState) -> None:
            await self.sleeper.sleep(self._final_delay(retry_state))
            raise self._exhausted_error(request, retry_state)

        retrying = AsyncRetrying(
            sleep=self.sleeper.sleep,
            retry_error_callback=exhausted,
            **self._retry_policy(request, body),
        )
        return await retrying(self.client.send, request)

    async def request(
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
        return await self.execute(request)

    async def get(self, url: str, **kw: Any) -> httpx.Response:
        return await self.request("GET", url, **kw)

    async def post(self, url: str, **kw: Any) -> httpx.Response:
        return await self.request("POST", url, **kw)

    async def put(self, url: str, **kw: Any) -> httpx.Response:
        return await self.request("PUT", url, **kw)

    async def patch(self, url: str, **kw: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kw)

    async def delete(self, url: str, **kw: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kw)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "AsyncRetryingExecutor":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
