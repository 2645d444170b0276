"""
Logging configuration.

Single stdout handler whose records carry the request correlation id.

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys

from convoquota.observability.correlation import get_correlation_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"

# Chatty at INFO; their warnings still get through
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite", "google_genai", "urllib3")


class CorrelationIdFilter(logging.Filter):
    """Attach the current correlation ID to every record ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Install the stdout handler on the root logger, replacing existing handlers.

    Safe to call more than once (application reloads, tests).

    Args:
        level: Root log level name; unknown names fall back to INFO
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
