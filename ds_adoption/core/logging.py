"""Structured logging configuration: structlog over stdlib logging, rendered to stderr."""

from __future__ import annotations

import logging
import logging.config
import os
from dataclasses import dataclass

import structlog

_LEVEL_ENV = "DS_ADOPTION_LOG_LEVEL"
_FORMAT_ENV = "DS_ADOPTION_LOG_FORMAT"
_FORMATS = ("console", "json")


@dataclass(frozen=True)
class LogSettings:
    level: str = "INFO"
    fmt: str = "console"


def resolve_settings(verbose: bool = False) -> LogSettings:
    """Settings from the environment; ``verbose`` only changes the default level.

    Unknown formats fall back to ``console``.
    """
    level = os.environ.get(_LEVEL_ENV, "DEBUG" if verbose else "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    fmt = os.environ.get(_FORMAT_ENV, "console").lower()
    return LogSettings(level=level, fmt=fmt if fmt in _FORMATS else "console")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(verbose: bool = False) -> LogSettings:
    """Route structlog through stdlib logging to stderr.

    stdout is left untouched so the JSON report can be piped.
    """
    settings = resolve_settings(verbose)
    shared = _shared_processors()
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if settings.fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "root": {"handlers": ["stderr"], "level": "WARNING"},
            "loggers": {
                "ds_adoption": {"level": settings.level},
            },
        }
    )
    return settings
