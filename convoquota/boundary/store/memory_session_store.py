"""
In-process session store.

Keeps sessions in a dict guarded by one asyncio.Lock per session id. A lock
lives only while some task holds or waits for it.
Suitable for a single worker process (local development, tests); use the
SQL store when several processes serve the same sessions.

Dependencies: asyncio, convoquota.boundary.store
System role: Single-process session store
"""

import asyncio
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from convoquota.boundary.store.session_store import SessionStore
from convoquota.core.exceptions import SessionNotFoundError
from convoquota.core.history import ConversationHistoryManager
from convoquota.core.session.records import (
    ExchangeRecord,
    HistoryEntry,
    SessionRecord,
    utc_now,
)


@dataclass
class _SessionLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class InMemorySessionStore(SessionStore):
    """Session store holding records in process memory."""

    def __init__(self, history_manager: ConversationHistoryManager) -> None:
        super().__init__(history_manager)
        self._sessions: dict[str, SessionRecord] = {}
        self._exchanges: dict[str, list[ExchangeRecord]] = {}
        self._exchange_ids: set[str] = set()
        self._locks: dict[str, _SessionLock] = {}

    @asynccontextmanager
    async def _lock(self, session_id: str) -> AsyncIterator[None]:
        entry = self._locks.get(session_id)
        if entry is None:
            entry = self._locks[session_id] = _SessionLock()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[session_id]

    def _require(self, session_id: str) -> SessionRecord:
        current = self._sessions.get(session_id)
        if current is None:
            raise SessionNotFoundError(session_id)
        return current

    def _write(self, record: SessionRecord, **changes) -> SessionRecord:
        updated = record.with_changes(
            revision=record.revision + 1,
            updated_at=utc_now(),
            **changes,
        )
        self._sessions[record.session_id] = updated
        return updated

    async def get(self, session_id: str) -> SessionRecord | None:
        return self._sessions.get(session_id)

    async def create_if_absent(self, session_id: str) -> SessionRecord:
        async with self._lock(session_id):
            current = self._sessions.get(session_id)
            if current is None:
                current = SessionRecord(session_id=session_id)
                self._sessions[session_id] = current
            return current

    async def compare_and_set_usage(
        self,
        session_id: str,
        expected: int,
        new: int,
    ) -> SessionRecord | None:
        async with self._lock(session_id):
            current = self._sessions.get(session_id)
            if current is None or current.usage_count != expected:
                return None
            return self._write(current, usage_count=new)

    async def append_history(
        self,
        session_id: str,
        entries: Sequence[HistoryEntry],
    ) -> SessionRecord:
        async with self._lock(session_id):
            current = self._require(session_id)
            history = self.history_manager.extend(current.history, entries)
            if history == current.history:
                return current
            return self._write(current, history=history)

    async def link_account(self, session_id: str, account_id: str) -> SessionRecord:
        async with self._lock(session_id):
            current = self._require(session_id)
            if current.linked_account_id is not None:
                return current
            return self._write(current, linked_account_id=account_id)

    async def capture_email(self, session_id: str, email: str) -> SessionRecord:
        async with self._lock(session_id):
            current = self._require(session_id)
            if current.captured_email == email:
                return current
            return self._write(current, captured_email=email)

    async def save_exchange(self, exchange: ExchangeRecord) -> None:
        if exchange.id in self._exchange_ids:
            return
        self._exchange_ids.add(exchange.id)
        self._exchanges.setdefault(exchange.session_id, []).append(exchange)

    async def list_exchanges(self, session_id: str) -> list[ExchangeRecord]:
        return sorted(self._exchanges.get(session_id, []), key=lambda item: item.created_at)
