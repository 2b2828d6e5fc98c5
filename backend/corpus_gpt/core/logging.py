"""Logging utilities for Corpus GPT."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, TextIO

import orjson

if TYPE_CHECKING:
    from corpus_gpt.core.config import Settings

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``ctx_*`` extras are copied through."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        payload.update({key: value for key, value in vars(record).items() if key.startswith("ctx_")})
        return orjson.dumps(payload, default=str).decode("utf-8")


def configure_logging(
    level: str | int = "INFO",
    use_json: bool = True,
    debug: bool = False,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Install a single root handler. ``debug`` forces DEBUG with plain-text lines."""
    if debug:
        level, use_json = logging.DEBUG, False
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter() if use_json else logging.Formatter(PLAIN_FORMAT))
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]
    logging.captureWarnings(True)
    return handler


def configure_from_settings(settings: "Settings", stream: TextIO | None = None) -> logging.Handler:
    return configure_logging(
        level=settings.log_level,
        use_json=settings.log_json,
        debug=settings.debug,
        stream=stream,
    )


def get_logger(name: str = "corpus_gpt") -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


__all__ = ["JsonFormatter", "configure_logging", "configure_from_settings", "get_logger"]
