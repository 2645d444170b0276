"""
Session domain records.

Immutable value objects exchanged between the store, the quota enforcer
and the exchange orchestrator. Store implementations convert their native
rows into these records so the core never touches ORM instances.

Dependencies: dataclasses
System role: Domain data model for sessions, exchanges and conversations
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class HistoryEntry:
    """
    One turn in the rolling conversation history.

    Attributes:
        role: "user" or "assistant"
        content: Turn text
        exchange_id: Exchange that produced the turn, used to make appends idempotent
    """

    role: str
    content: str
    exchange_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.exchange_id is not None:
            data["exchange_id"] = self.exchange_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        return cls(
            role=str(data.get("role", "")),
            content=str(data.get("content", "")),
            exchange_id=data.get("exchange_id"),
        )


@dataclass(frozen=True)
class SessionRecord:
    """
    Snapshot of a session as last committed to the store.

    Attributes:
        session_id: Opaque client-supplied identifier
        usage_count: Billable exchanges consumed so far
        linked_account_id: Account the session is linked to, if any
        captured_email: Contact email left by the visitor, if any
        history: Rolling history, most recent last
        revision: Optimistic-lock version, bumped on every write
        created_at: Creation timestamp (UTC)
        updated_at: Last write timestamp (UTC)
    """

    session_id: str
    usage_count: int = 0
    linked_account_id: str | None = None
    history: tuple[HistoryEntry, ...] = ()
    revision: int = 0
    captured_email: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def with_changes(self, **changes: Any) -> "SessionRecord":
        return replace(self, **changes)


@dataclass(frozen=True)
class ExchangeRecord:
    """Immutable question/answer pair kept for audit and history reconstruction."""

    session_id: str
    question_text: str
    answer_text: str
    billable: bool
    account_id: str | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class ConversationRecord:
    """Per-account index entry pointing at one session's conversation."""

    id: str
    account_id: str
    session_id: str
    title: str
    last_message: str
    message_count: int
    created_at: datetime
    updated_at: datetime
