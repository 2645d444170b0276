"""
SQLAlchemy-backed session store.

Each operation runs in its own short transaction from the session factory,
so concurrent requests never share an AsyncSession. Counter and history
writes are conditional UPDATEs, which makes the backing database the
arbiter of races across workers and processes.

Dependencies: sqlalchemy, tenacity, convoquota.boundary.db
System role: Durable session store (PostgreSQL in production)
"""

import logging
import uuid
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from tenacity import AsyncRetrying, RetryError, retry_if_exception_type, stop_after_attempt

from convoquota.boundary.db.CRUD.exchange_crud import exchange_crud
from convoquota.boundary.db.CRUD.session_crud import session_crud
from convoquota.boundary.db.models.exchange_model import ExchangeModel
from convoquota.boundary.db.models.session_model import SessionModel
from convoquota.boundary.store.session_store import SessionStore
from convoquota.core.exceptions import (
    ConcurrentUpdateConflictError,
    SessionNotFoundError,
    StaleWriteError,
    StoreUnavailableError,
)
from convoquota.core.history import ConversationHistoryManager
from convoquota.core.session.records import (
    ExchangeRecord,
    HistoryEntry,
    SessionRecord,
    utc_now,
)

logger = logging.getLogger(__name__)


def to_session_record(row: SessionModel) -> SessionRecord:
    """Convert a SessionModel row into an immutable SessionRecord."""
    return SessionRecord(
        session_id=row.id,
        usage_count=row.usage_count or 0,
        linked_account_id=row.linked_account_id,
        history=tuple(HistoryEntry.from_dict(item) for item in (row.history or [])),
        revision=row.revision or 0,
        captured_email=row.captured_email,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_exchange_record(row: ExchangeModel) -> ExchangeRecord:
    """Convert an ExchangeModel row into an ExchangeRecord."""
    return ExchangeRecord(
        id=str(row.id),
        session_id=row.session_id,
        account_id=row.account_id,
        question_text=row.question_text,
        answer_text=row.answer_text,
        billable=row.billable,
        created_at=row.created_at,
    )


class SqlSessionStore(SessionStore):
    """Session store persisting to a relational database through SQLAlchemy."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        history_manager: ConversationHistoryManager,
        retry_budget: int = 3,
    ) -> None:
        """
        Initialize SQL session store.

        Args:
            session_factory: Async session factory bound to the engine
            history_manager: Window policy applied on history appends
            retry_budget: Attempts for optimistic history rewrites
        """
        super().__init__(history_manager)
        self._session_factory = session_factory
        self.retry_budget = retry_budget

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """
        Open a session, commit on success and map driver errors.

        Raises:
            StoreUnavailableError: Any SQLAlchemy or connection error
        """
        try:
            async with self._session_factory() as db:
                yield db
                await db.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                f"{__name__}:{operation} - store error: {type(e).__name__}: {e}"
            )
            raise StoreUnavailableError(
                "Session store unavailable",
                operation=operation,
                details={"error_type": type(e).__name__},
            ) from e

    async def get(self, session_id: str) -> SessionRecord | None:
        async with self._transaction("get") as db:
            row = await session_crud.get_by_id(db, session_id)
            return to_session_record(row) if row is not None else None

    async def create_if_absent(self, session_id: str) -> SessionRecord:
        existing = await self.get(session_id)
        if existing is not None:
            return existing

        try:
            async with self._transaction("create") as db:
                row = await session_crud.create(
                    db,
                    id=session_id,
                    usage_count=0,
                    history=[],
                    revision=0,
                )
                record = to_session_record(row)
            logger.info(f"{__name__}:create_if_absent - created session_id={session_id}")
            return record
        except StoreUnavailableError as e:
            if not isinstance(e.__cause__, IntegrityError):
                raise

        # Another worker created the row between our read and insert
        existing = await self.get(session_id)
        if existing is None:
            raise StoreUnavailableError("Session vanished after concurrent create", operation="create")
        return existing

    async def compare_and_set_usage(
        self,
        session_id: str,
        expected: int,
        new: int,
    ) -> SessionRecord | None:
        async with self._transaction("compare_and_set_usage") as db:
            swapped = await session_crud.compare_and_set_usage(db, session_id, expected, new)
            if not swapped:
                return None
            row = await session_crud.get_by_id(db, session_id)
            return to_session_record(row) if row is not None else None

    async def append_history(
        self,
        session_id: str,
        entries: Sequence[HistoryEntry],
    ) -> SessionRecord:
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.retry_budget),
                retry=retry_if_exception_type(StaleWriteError),
                before_sleep=lambda retry_state: logger.info(
                    f"{__name__}:append_history - revision moved, retry "
                    f"{retry_state.attempt_number}/{self.retry_budget} session_id={session_id}"
                ),
            ):
                with attempt:
                    record = await self._rewrite_history(session_id, entries)
        except RetryError as e:
            raise ConcurrentUpdateConflictError(session_id, self.retry_budget) from e
        return record

    async def _rewrite_history(
        self,
        session_id: str,
        entries: Sequence[HistoryEntry],
    ) -> SessionRecord:
        """
        Read the session and rewrite its history guarded by its revision.

        Raises:
            StaleWriteError: Another write bumped the revision meanwhile
        """
        async with self._transaction("append_history") as db:
            row = await session_crud.get_by_id(db, session_id)
            if row is None:
                raise SessionNotFoundError(session_id)
            current = to_session_record(row)
            history = self.history_manager.extend(current.history, entries)
            if history == current.history:
                return current

            swapped = await session_crud.compare_and_set_history(
                db,
                session_id,
                expected_revision=current.revision,
                history=[entry.to_dict() for entry in history],
            )
            if not swapped:
                raise StaleWriteError(session_id, "revision", current.revision)
            return current.with_changes(
                history=history,
                revision=current.revision + 1,
                updated_at=utc_now(),
            )

    async def link_account(self, session_id: str, account_id: str) -> SessionRecord:
        async with self._transaction("link_account") as db:
            linked = await session_crud.link_account(db, session_id, account_id)
            row = await session_crud.get_by_id(db, session_id)
            if row is None:
                raise SessionNotFoundError(session_id)
            if linked:
                logger.info(
                    f"{__name__}:link_account - session_id={session_id} linked to account"
                )
            return to_session_record(row)

    async def capture_email(self, session_id: str, email: str) -> SessionRecord:
        async with self._transaction("capture_email") as db:
            written = await session_crud.capture_email(db, session_id, email)
            row = await session_crud.get_by_id(db, session_id)
            if row is None:
                raise SessionNotFoundError(session_id)
            if written:
                logger.info(f"{__name__}:capture_email - session_id={session_id} email captured")
            return to_session_record(row)

    async def save_exchange(self, exchange: ExchangeRecord) -> None:
        exchange_id = uuid.UUID(exchange.id)
        async with self._transaction("save_exchange") as db:
            if await exchange_crud.get_by_id(db, exchange_id) is not None:
                return
            await exchange_crud.create(
                db,
                id=exchange_id,
                session_id=exchange.session_id,
                account_id=exchange.account_id,
                question_text=exchange.question_text,
                answer_text=exchange.answer_text,
                billable=exchange.billable,
                created_at=exchange.created_at,
            )

    async def list_exchanges(self, session_id: str) -> list[ExchangeRecord]:
        async with self._transaction("list_exchanges") as db:
            rows = await exchange_crud.get_by_session(db, session_id)
            return [to_exchange_record(row) for row in rows]

    async def ping(self) -> None:
        async with self._transaction("ping") as db:
            await db.execute(text("SELECT 1"))
