"""Structured logging setup."""

import logging
import sys

import structlog

from fxmoney.core.config import Settings, settings as default_settings

_configured = False

# Library loggers stay silent unless the host application configures logging
logging.getLogger("fxmoney").addHandler(logging.NullHandler())


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def setup_logging(config: Settings = None, force: bool = False) -> None:
    """
    Configure structlog on top of the standard library logging module.

    Args:
        config: Settings to read LOG_LEVEL and LOG_JSON from (default: module settings)
        force: Reconfigure even if logging was already set up
    """
    global _configured
    if _configured and not force:
        return

    config = config or default_settings
    level = config.LOG_LEVEL.upper()
    shared_processors = _shared_processors()

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if config.LOG_JSON:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger backed by the standard library logger of the same name.

    Until the host application calls setup_logging, events go through
    stdlib logging only and the library's NullHandler keeps them silent.
    """
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)
