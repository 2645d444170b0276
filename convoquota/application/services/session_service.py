"""
Session service orchestrator.

Coordinates session lifecycle operations: open (get or create), account
linking, rolling-history reads and contact-email capture.

Dependencies: convoquota.boundary.store, convoquota.core
System role: Session use case orchestration
"""

import logging

from convoquota.boundary.store.session_store import MAX_SESSION_ID_LENGTH, SessionStore
from convoquota.core.exceptions import SessionNotFoundError, ValidationError
from convoquota.core.quota_enforcer import QuotaEnforcer
from convoquota.core.session.records import SessionRecord

logger = logging.getLogger(__name__)


class SessionService:
    """Session service orchestrator."""

    def __init__(self, store: SessionStore, enforcer: QuotaEnforcer) -> None:
        """
        Initialize session service.

        Args:
            store: Session store
            enforcer: Quota enforcer used to report remaining quota
        """
        self.store = store
        self.enforcer = enforcer

    async def open_session(self, session_id: str, account_id: str | None = None) -> dict:
        """
        Get or create a session and report its quota status.

        Args:
            session_id: Client-held session token
            account_id: Account resolved from the bearer credential, if any

        Returns:
            dict: session_id, usage_count, remaining, limit, linked_account_id, is_new

        Raises:
            ValidationError: Empty or oversized session id
            StoreUnavailableError: Store unreachable
        """
        session_id = (session_id or "").strip()
        if not session_id:
            raise ValidationError("Session ID required", field="session_id")
        if len(session_id) > MAX_SESSION_ID_LENGTH:
            raise ValidationError("Session ID too long", field="session_id")

        existing = await self.store.get(session_id)
        session = existing or await self.store.create_if_absent(session_id)
        if account_id and session.linked_account_id is None:
            session = await self.store.link_account(session_id, account_id)

        return self._status(session, is_new=existing is None)

    async def get_history(self, session_id: str) -> list[dict]:
        """
        Get the rolling history for a session.

        Args:
            session_id: Session identifier

        Returns:
            list[dict]: Entries with role and content, oldest first

        Raises:
            SessionNotFoundError: Session was never created
        """
        session = await self.store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return [{"role": entry.role, "content": entry.content} for entry in session.history]

    async def capture_email(self, session_id: str, email: str) -> SessionRecord:
        """
        Record the contact email a visitor leaves on their session.

        Args:
            session_id: Session identifier
            email: Contact email, already syntax-checked at the API edge

        Returns:
            SessionRecord: Session with the email stored

        Raises:
            ValidationError: Blank email
            SessionNotFoundError: Session was never created
            StoreUnavailableError: Store unreachable
        """
        email = (email or "").strip().lower()
        if not email:
            raise ValidationError("Email required", field="email")
        return await self.store.capture_email(session_id, email)

    def _status(self, session: SessionRecord, is_new: bool) -> dict:
        return {
            "session_id": session.session_id,
            "usage_count": session.usage_count,
            "remaining": self.enforcer.remaining(session),
            "limit": self.enforcer.limit,
            "linked_account_id": session.linked_account_id,
            "is_new": is_new,
        }
