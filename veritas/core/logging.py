"""JSON-lines logging through structlog.

Modules keep using the standard library logger, logging a snake_case event
name as the message with structured fields in ``extra``::

    logger.warning("remote_ocr_failed_fallback", extra={"engine": "...", "error": "..."})

``configure_logging`` routes those records through structlog's
``ProcessorFormatter`` so every call renders as one JSON object per line.
"""
from __future__ import annotations

import logging
import sys

import structlog


def build_formatter() -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.ExtraAdder(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(default=str),
        ],
    )


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())
