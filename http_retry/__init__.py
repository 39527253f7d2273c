"""HTTP request executors with retry and linear backoff for transient failures."""

from .async_executor import AsyncRetryingExecutor
from .errors import HttpRetryError, RequestBodyError, RetriesExhaustedError
from .executor import RetryingExecutor
from .logging_setup import TRACE, configure_logging
from .options import (
    ExecutorOption,
    with_backoff,
    with_client,
    with_retries,
    with_sleeper,
    with_timeout,
)
from .sleepers import AsyncioSleeper, AsyncSleeper, Sleeper, TimeSleeper

__all__ = [
    "AsyncRetryingExecutor",
    "AsyncSleeper",
    "AsyncioSleeper",
    "ExecutorOption",
    "HttpRetryError",
    "RequestBodyError",
    "RetriesExhaustedError",
    "RetryingExecutor",
    "Sleeper",
    "TRACE",
    "TimeSleeper",
    "configure_logging",
    "with_backoff",
    "with_client",
    "with_retries",
    "with_sleeper",
    "with_timeout",
]
