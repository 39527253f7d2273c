"""Configuration options applied to an executor at construction time.

Each option mutates a single concern of the executor and options are applied
in the order given, so later options win.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Union

if TYPE_CHECKING:
    from .base import BaseRetryingExecutor

ExecutorOption = Callable[["BaseRetryingExecutor"], None]


def with_retries(retries: int) -> ExecutorOption:
    """Make exactly *retries* attempts per request."""

    if retries < 1:
        raise ValueError("retries must be at least 1")

    def apply(executor: "BaseRetryingExecutor") -> None:
        executor.max_retries = retries

    return apply


def with_backoff(backoff: Union[int, float]) -> ExecutorOption:
    """Wait ``attempt_index * backoff`` seconds after each failed attempt."""

    if backoff < 0:
        raise ValueError("backoff must not be negative")

    def apply(executor: "BaseRetryingExecutor") -> None:
        executor.backoff = backoff

    return apply


def with_timeout(timeout: float) -> ExecutorOption:
    """Set the per-attempt timeout.

    The timeout lives on the transport, so this replaces the executor's client
    with a freshly built one. Retry count and backoff are left alone; a client
    supplied earlier through :func:`with_client` is discarded.
    """

    def apply(executor: "BaseRetryingExecutor") -> None:
        executor.timeout = timeout
        executor._reset_client()

    return apply


def with_client(client: Any) -> ExecutorOption:
    """Send requests through a shared client the executor will not close."""

    def apply(executor: "BaseRetryingExecutor") -> None:
        executor._set_client(client, owned=False)

    return apply


def with_sleeper(sleeper: Any) -> ExecutorOption:
    """Replace the wall-clock delay source, e.g. with a recording double."""

    def apply(executor: "BaseRetryingExecutor") -> None:
        executor.sleeper = sleeper

    return apply
