"""
Session CRUD operations.

Conditional updates for the usage counter, history, account link and
captured email.
Every write bumps `revision` and `updated_at`; each method returns whether
its condition matched so callers can detect lost races.

Dependencies: sqlalchemy, convoquota.boundary.db.models
System role: Session persistence operations
"""

from typing import Any

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from convoquota.boundary.db.CRUD.base_crud import BaseCRUD
from convoquota.boundary.db.models.session_model import SessionModel
from convoquota.core.session.records import utc_now


class SessionCRUD(BaseCRUD[SessionModel]):
    """CRUD operations for SessionModel."""

    def __init__(self) -> None:
        super().__init__(SessionModel)

    async def _write_if(self, session: AsyncSession, id: str, condition: Any, **values: Any) -> bool:
        return await self.update_where(
            session,
            SessionModel.id == id,
            condition,
            revision=SessionModel.revision + 1,
            updated_at=utc_now(),
            **values,
        )

    async def compare_and_set_usage(
        self,
        session: AsyncSession,
        id: str,
        expected: int,
        new: int,
    ) -> bool:
        """
        Set usage_count to `new` only where it still equals `expected`.

        Returns:
            True if the row matched and was updated, False on a lost race
        """
        return await self._write_if(session, id, SessionModel.usage_count == expected, usage_count=new)

    async def compare_and_set_history(
        self,
        session: AsyncSession,
        id: str,
        expected_revision: int,
        history: list[dict],
    ) -> bool:
        """
        Replace history only where revision still equals `expected_revision`.

        Returns:
            True if the row matched and was updated, False on a lost race
        """
        return await self._write_if(session, id, SessionModel.revision == expected_revision, history=history)

    async def link_account(self, session: AsyncSession, id: str, account_id: str) -> bool:
        """
        Link an account to a session that has none yet.

        Returns:
            True if the link was written, False if already linked or missing
        """
        return await self._write_if(
            session,
            id,
            SessionModel.linked_account_id.is_(None),
            linked_account_id=account_id,
        )


    async def capture_email(self, session: AsyncSession, id: str, email: str) -> bool:
        """
        Store the visitor's contact email unless it is already the stored one.

        Returns:
            True if the email was written, False if unchanged or missing
        """
        return await self._write_if(
            session,
            id,
            or_(SessionModel.captured_email.is_(None), SessionModel.captured_email != email),
            captured_email=email,
        )


session_crud = SessionCRUD()
