"""
Observability module.

Provides structured logging helpers, correlation ID tracking and
request logging middleware.
"""

from convoquota.observability.correlation import correlation_scope, get_correlation_id
from convoquota.observability.logger import configure_logging

__all__ = ["configure_logging", "correlation_scope", "get_correlation_id"]
