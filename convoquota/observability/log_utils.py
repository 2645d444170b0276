"""
Structured logging helpers.

Context passed as keyword arguments is rendered into short, log-safe
strings and attached to the record via `extra=`. Question and answer text
is never logged verbatim; use `text_summary` to log its size instead.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import hashlib
import logging
from datetime import datetime
from enum import Enum
from typing import Any

MAX_VALUE_LENGTH = 200

# LogRecord attributes that must not be overwritten through extra=
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def render_value(value: Any, max_length: int = MAX_VALUE_LENGTH) -> str:
    """
    Render a context value as a bounded string.

    Args:
        value: Value to render
        max_length: Maximum length before truncating

    Returns:
        str: Log-safe representation
    """
    if value is None:
        return "None"
    if isinstance(value, Enum):
        rendered = str(value.value)
    elif isinstance(value, datetime):
        rendered = value.isoformat()
    elif isinstance(value, (list, tuple, set, frozenset)):
        rendered = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        rendered = f"dict({len(value)} keys)"
    else:
        try:
            rendered = str(value)
        except Exception as e:
            return f"<unrenderable {type(value).__name__}: {type(e).__name__}>"

    if len(rendered) > max_length:
        return rendered[:max_length] + f"... ({len(rendered)} chars)"
    return rendered


def text_summary(text: str | None) -> str:
    """
    Summarise user or model text without revealing it.

    Returns:
        str: "len=<n> sha=<8 hex>" or "empty"
    """
    if not text:
        return "empty"
    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:8]
    return f"len={len(text)} sha={digest}"


def _context(context: dict[str, Any]) -> dict[str, str]:
    rendered = {}
    for key, value in context.items():
        name = f"ctx_{key}" if key in _RESERVED else key
        rendered[name] = render_value(value)
    return rendered


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """
    Log a message with structured context.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Arbitrary key-value pairs attached to the record
    """
    logger.log(level, message, extra=_context(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log an exception with its traceback and context.

    Details carried by ConvoQuotaException subclasses are attached too;
    explicit context wins on key clashes.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Additional context
    """
    merged: dict[str, Any] = dict(getattr(exc, "details", None) or {})
    merged.update(context)
    merged["error_type"] = type(exc).__name__
    logger.error(message, exc_info=exc, extra=_context(merged))
