"""Logging configuration: structlog output for the app, the server and the OINO library."""

import logging
import sys

import structlog

# Loggers that get the shared handler instead of propagating to root
SERVER_LOGGERS = ['uvicorn', 'uvicorn.access', 'uvicorn.error', 'fastapi']
LIBRARY_LOGGER = 'namerec.oino'


def _console_handler() -> logging.Handler:
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(),
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt='iso', utc=False),
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    return handler


def configure_logging(log_level: str, library_log_level: str | None = None) -> None:
    """
    Configure structlog and route standard logging through the same renderer.

    The OINO library logs with the standard logging module (one logger per
    module under 'namerec.oino'); its records are rendered like the app's
    own structlog events. SQL statements are logged by the library at DEBUG.

    Args:
        log_level: Level for the app and server loggers (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        library_log_level: Level for the OINO library loggers (defaults to log_level)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    library_level = getattr(logging, (library_log_level or log_level).upper(), numeric_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso', utc=False),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = _console_handler()

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(min(numeric_level, library_level))

    for logger_name in SERVER_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.handlers = [handler]
        logger.setLevel(numeric_level)
        logger.propagate = False

    # Library records propagate to root
    logging.getLogger(LIBRARY_LOGGER).setLevel(library_level)
