"""
http_retry/config.py

Environment-driven defaults for the retrying executors.
- Canonical variables are prefixed ``HTTP_RETRY_`` and validated by pydantic.
- Legacy aliases (``HTTP_MAX_RETRIES``, ``HTTP_RETRY_BACKOFF``, ``HTTP_TIMEOUT``) are read
  only when the canonical variable is unset; malformed alias values fall back to defaults.
- Out-of-range values (non-positive retries or timeout, negative backoff) are rejected
  by pydantic when the settings object is built.

Examples
--------
# Bash:
export HTTP_RETRY_MAX_RETRIES=5
export HTTP_RETRY_TIMEOUT_SECONDS=10
"""

from __future__ import annotations

import os
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .options import ExecutorOption, with_backoff, with_retries, with_timeout
from .retry import DEFAULT_BACKOFF_SECONDS, DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT_SECONDS


def _coalesce_env(*names: str, default: Optional[str] = None) -> Optional[str]:
    """Return the first non-empty environment variable from *names*."""
    for name in names:
        val = os.getenv(name)
        if val is not None and str(val).strip() != "":
            return val
    return default


def _parse_int(value: Optional[str], *, default: int) -> int:
    if value is None or str(value).strip() == "":
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def _parse_float(value: Optional[str], *, default: float) -> float:
    if value is None or str(value).strip() == "":
        return default
    try:
        return float(str(value).strip())
    except ValueError:
        return default


class RetrySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HTTP_RETRY_", case_sensitive=False, validate_default=True
    )

    max_retries: int = Field(
        default_factory=lambda: _parse_int(
            _coalesce_env("HTTP_MAX_RETRIES"),
            default=DEFAULT_MAX_RETRIES,
        ),
        ge=1,
    )
    backoff_seconds: float = Field(
        default_factory=lambda: _parse_float(
            _coalesce_env("HTTP_RETRY_BACKOFF"),
            default=DEFAULT_BACKOFF_SECONDS,
        ),
        ge=0,
    )
    timeout_seconds: float = Field(
        default_factory=lambda: _parse_float(
            _coalesce_env("HTTP_TIMEOUT"),
            default=DEFAULT_TIMEOUT_SECONDS,
        ),
        gt=0,
    )
    log_level: str = "INFO"

    def executor_options(self) -> List[ExecutorOption]:
        """Options reproducing these settings on an executor."""
        return [
            with_retries(self.max_retries),
            with_backoff(self.backoff_seconds),
            with_timeout(self.timeout_seconds),
        ]


# Singleton settings instance
settings = RetrySettings()
