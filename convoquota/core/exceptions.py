"""
Exception hierarchy for the conversation quota service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class ConvoQuotaException(Exception):
    """Base exception for all conversation quota errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ConvoQuotaException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class SessionNotFoundError(ConvoQuotaException):
    """Raised when a session cannot be found."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        details = details or {}
        details["session_id"] = session_id
        super().__init__(f"Session not found: {session_id}", details)


class StoreUnavailableError(ConvoQuotaException):
    """Raised when the backing session store cannot be reached."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize store unavailable error.

        Args:
            message: Error message
            operation: Store operation that failed (get, create, cas, ...)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class ConcurrentUpdateConflictError(ConvoQuotaException):
    """Raised when the usage counter CAS retry budget is exhausted."""

    def __init__(
        self,
        session_id: str,
        attempts: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details.update({"session_id": session_id, "attempts": attempts})
        super().__init__(
            f"Concurrent update conflict on session {session_id} after {attempts} attempts",
            details,
        )


class QuotaExhaustedError(ConvoQuotaException):
    """Raised when a metered session has used up its free-tier limit."""

    def __init__(
        self,
        session_id: str,
        usage_count: int,
        limit: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize quota exhausted error.

        Args:
            session_id: Session that hit the limit
            usage_count: Current usage count reported to the caller
            limit: Configured free-tier limit
            details: Additional context
        """
        self.usage_count = usage_count
        self.limit = limit
        details = details or {}
        details.update({"session_id": session_id, "usage_count": usage_count, "limit": limit})
        super().__init__("Question limit reached. Please sign up to continue.", details)


class InferenceFailureError(ConvoQuotaException):
    """Raised when the inference collaborator fails to produce an answer."""

    pass


class InferenceTimeoutError(InferenceFailureError):
    """Raised when the inference collaborator exceeds its time budget."""

    def __init__(self, timeout_seconds: float, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["timeout_seconds"] = timeout_seconds
        super().__init__(f"Inference timed out after {timeout_seconds}s", details)


class ConversationNotFoundError(ConvoQuotaException):
    """Raised when a conversation does not exist or belongs to another account."""

    def __init__(self, conversation_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["conversation_id"] = conversation_id
        super().__init__(f"Conversation not found: {conversation_id}", details)


class StaleWriteError(ConvoQuotaException):
    """
    Raised when a conditional write matched no row because a concurrent
    writer got there first.

    Retried internally by the quota enforcer and the SQL history writer;
    callers only ever see ConcurrentUpdateConflictError.
    """

    def __init__(self, session_id: str, field: str, expected: Any) -> None:
        super().__init__(
            f"Stale {field} write on session {session_id}",
            {"session_id": session_id, "field": field, "expected": expected},
        )
