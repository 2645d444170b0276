"""
Session store contract.

Abstract interface over the durable record of each visitor session and the
immutable exchange log. Implementations must make compare_and_set_usage
atomic per session and must not hold any lock spanning different sessions.

Dependencies: abc, convoquota.core.session
System role: Persistence contract for the quota engine
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from convoquota.core.history import ConversationHistoryManager
from convoquota.core.session.records import ExchangeRecord, HistoryEntry, SessionRecord

MAX_SESSION_ID_LENGTH = 255


class SessionStore(ABC):
    """
    Durable session and exchange storage.

    Every operation is idempotent with respect to repeated identical input
    and reads reflect the latest committed write. Backend failures surface as
    StoreUnavailableError, never as empty results.
    """

    def __init__(self, history_manager: ConversationHistoryManager) -> None:
        self.history_manager = history_manager

    @abstractmethod
    async def get(self, session_id: str) -> SessionRecord | None:
        """Return the committed session or None if it was never created."""

    @abstractmethod
    async def create_if_absent(self, session_id: str) -> SessionRecord:
        """Return the session, creating it with zero usage and empty history if unseen."""

    @abstractmethod
    async def compare_and_set_usage(
        self,
        session_id: str,
        expected: int,
        new: int,
    ) -> SessionRecord | None:
        """
        Set usage_count to `new` only if it still equals `expected`.

        Returns:
            SessionRecord | None: Updated session, or None when the stored
            value no longer matches (lost race) or the session is missing
        """

    @abstractmethod
    async def append_history(
        self,
        session_id: str,
        entries: Sequence[HistoryEntry],
    ) -> SessionRecord:
        """Append entries to the rolling history, truncated to the manager's window."""

    @abstractmethod
    async def link_account(self, session_id: str, account_id: str) -> SessionRecord:
        """Link the session to an account; the first linked account wins."""

    @abstractmethod
    async def capture_email(self, session_id: str, email: str) -> SessionRecord:
        """Store the visitor's contact email on the session; a later email replaces it."""

    @abstractmethod
    async def save_exchange(self, exchange: ExchangeRecord) -> None:
        """Persist an exchange record; saving the same record twice is a no-op."""

    @abstractmethod
    async def list_exchanges(self, session_id: str) -> list[ExchangeRecord]:
        """Return the session's exchanges, oldest first."""

    async def ping(self) -> None:
        """Raise StoreUnavailableError if the backend cannot be reached."""
