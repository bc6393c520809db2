"""Structured logging configuration — structlog + stdlib logging."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

from nxaffected.config import LOG_FORMATS, LOG_LEVELS, normalize_choice


def _resolve(flag: str | None, env_var: str, configured: str, allowed: tuple[str, ...]) -> str:
    """Pick the CLI flag, else a valid env value, else the configured value."""
    if flag:
        return normalize_choice(flag, allowed, configured)
    return normalize_choice(os.environ.get(env_var), allowed, configured)


def setup_logging(
    level: str | None = None,
    fmt: str | None = None,
    *,
    configured_level: str = "INFO",
    configured_format: str = "console",
) -> None:
    """Configure structlog and stdlib logging.

    Precedence is *level* / *fmt* (CLI flags), then the environment, then
    the configured values:
        NXAFFECTED_LOG_LEVEL  — DEBUG | INFO | WARNING | ERROR
        NXAFFECTED_LOG_FORMAT — console | json

    Records go to stderr; stdout is reserved for the command's report.
    """
    log_level = _resolve(
        level, "NXAFFECTED_LOG_LEVEL",
        normalize_choice(configured_level, LOG_LEVELS, "INFO"), LOG_LEVELS,
    )
    log_format = _resolve(
        fmt, "NXAFFECTED_LOG_FORMAT",
        normalize_choice(configured_format, LOG_FORMATS, "console"), LOG_FORMATS,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
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
                    "foreign_pre_chain": shared_processors,
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
            "root": {
                "handlers": ["stderr"],
                "level": "WARNING",
            },
            "loggers": {
                "nxaffected": {"level": log_level},
            },
        }
    )
