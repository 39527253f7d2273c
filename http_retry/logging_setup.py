"""Logging helpers for the retrying executors."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_DEF_FMT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(
    level: Union[int, str, None] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """Configure the root logger once per process and return it.

    ``level`` defaults to :attr:`http_retry.config.settings.log_level`, or to
    ``INFO`` when the environment settings are malformed. When
    ``log_file`` is given a rotating file handler is attached as well.
    """

    if level is None:
        try:
            from .config import settings
        except ValidationError:
            # Malformed HTTP_RETRY_* values are reported by RetrySettings itself.
            level = logging.INFO
        else:
            level = settings.log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEF_FMT))
        root_logger.addHandler(handler)

    if log_file is not None:
        log_file = Path(log_file)
        already_configured = any(
            isinstance(handler, RotatingFileHandler)
            and getattr(handler, "baseFilename", "") == os.path.abspath(log_file)
            for handler in root_logger.handlers
        )
        if not already_configured:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                str(log_file), maxBytes=5_000_000, backupCount=3, encoding="utf-8"
            )
            file_handler.setFormatter(logging.Formatter(_DEF_FMT))
            root_logger.addHandler(file_handler)

    root_logger.setLevel(level)
    return root_logger
