"""JSON logging for the ``wonderland`` logger tree."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

from .json_formatter import JSONFormatter

if TYPE_CHECKING:
    from wonderland.core.config import Settings

ROOT_LOGGER = "wonderland"
LOG_FILENAME = "wonderland.log"
_HANDLER_TAG = "_wonderland_handler"


def _level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _tagged_handler(logger: logging.Logger, tag: str) -> logging.Handler | None:
    for handler in logger.handlers:
        if getattr(handler, _HANDLER_TAG, None) == tag:
            return handler
    return None


def _attach(logger: logging.Logger, handler: logging.Handler, tag: str) -> None:
    handler.setFormatter(JSONFormatter())
    setattr(handler, _HANDLER_TAG, tag)
    logger.addHandler(handler)


def configure_logging(settings: Settings) -> logging.Logger:
    """Route ``wonderland.*`` records to stdout as JSON lines.

    With ``settings.log_to_file`` a rotating ``wonderland.log`` is added under
    ``settings.log_dir``. Repeated calls reuse the attached handlers and only
    update the level.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(_level(settings.log_level))
    logger.propagate = False

    if _tagged_handler(logger, "stdout") is None:
        _attach(logger, logging.StreamHandler(stream=sys.stdout), "stdout")

    if settings.log_to_file:
        log_path = settings.log_dir / LOG_FILENAME
        tag = f"file:{log_path}"
        if _tagged_handler(logger, tag) is None:
            settings.log_dir.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                filename=log_path,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
                encoding="utf-8",
            )
            _attach(logger, handler, tag)

    return logger
