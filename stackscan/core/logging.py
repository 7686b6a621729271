"""Log setup for the scanner: structlog events rendered through stdlib handlers."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

# Client and driver loggers that would otherwise echo every registry request
# and SQL statement a scan makes.
_QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "asyncpg", "aiosqlite")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(level: str | None = None) -> None:
    """Route ``stackscan.*`` events to stderr.

    *level* overrides ``STACKSCAN_LOG_LEVEL`` (default INFO) for the
    stackscan loggers only. ``STACKSCAN_LOG_FORMAT=json`` switches to one
    JSON object per line. stdout is left to command output so that
    ``stackscan scan --json`` stays parseable.
    """
    env_level = os.environ.get("STACKSCAN_LOG_LEVEL", "INFO").upper()
    scan_level = (level or env_level).upper()
    log_format = os.environ.get("STACKSCAN_LOG_FORMAT", "console").lower()

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    loggers: dict[str, dict[str, str]] = {"stackscan": {"level": scan_level}}
    loggers.update({name: {"level": "WARNING"} for name in _QUIET_LOGGERS})

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "stackscan": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "stackscan",
                },
            },
            "root": {"handlers": ["stderr"], "level": env_level},
            "loggers": loggers,
        }
    )
