"""
Correlation ID propagation.

One id per request, carried in a ContextVar so every log line emitted
while serving it (services, stores, the agent) can be tied together.

Dependencies: contextvars
System role: Request tracing across service boundaries
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")

MAX_INBOUND_LENGTH = 128


def new_correlation_id(inbound: str | None = None) -> str:
    """Accept a caller-supplied id if it is sane, else mint a UUID4."""
    if inbound and len(inbound) <= MAX_INBOUND_LENGTH and inbound.isprintable():
        return inbound
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set correlation ID in context.

    Args:
        correlation_id: Optional correlation ID (generates new if None)

    Returns:
        str: The correlation ID that was set
    """
    value = new_correlation_id(correlation_id)
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    """Current correlation ID ("" outside a request)."""
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    correlation_id_ctx.set("")


@contextmanager
def correlation_scope(inbound: str | None = None) -> Iterator[str]:
    """
    Bind a correlation id for the duration of the block.

    The previous value is restored on exit, so nested scopes are safe.

    Yields:
        str: The bound correlation id
    """
    value = new_correlation_id(inbound)
    token = correlation_id_ctx.set(value)
    try:
        yield value
    finally:
        correlation_id_ctx.reset(token)
