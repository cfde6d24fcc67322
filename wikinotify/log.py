"""Logging setup for applications embedding the notifications client.

Only the ``wikinotify`` logger tree is configured; the root logger and any
handlers the host application installed are left alone.
"""
from __future__ import annotations

import logging
import sys

from pythonjsonlogger import jsonlogger

from wikinotify.config import NotificationsConfig

LOGGER_NAME = "wikinotify"
TEXT_FORMAT = "%(asctime)s %(name)-24s %(levelname)-5s %(message)s"
JSON_FORMAT = "%(timestamp)s %(severity)s %(name)s %(message)s"


class WikinotifyJsonFormatter(jsonlogger.JsonFormatter):
    """One JSON object per record with ``timestamp`` and ``severity`` keys."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("timestamp"):
            log_record["timestamp"] = record.created
        log_record["severity"] = record.levelname


def _formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return WikinotifyJsonFormatter(JSON_FORMAT)
    return logging.Formatter(TEXT_FORMAT)


def setup_logging(config: NotificationsConfig, log_file: str | None = None) -> logging.Logger:
    """Attach stdout (and optionally file) handlers to the ``wikinotify`` logger.

    Calling it again replaces the handlers from the previous call.
    """
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    logger = logging.getLogger(LOGGER_NAME)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = _formatter(config.log_format)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger
