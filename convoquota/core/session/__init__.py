"""Session domain records."""

from convoquota.core.session.records import (
    ConversationRecord,
    ExchangeRecord,
    HistoryEntry,
    SessionRecord,
)

__all__ = [
    "ConversationRecord",
    "ExchangeRecord",
    "HistoryEntry",
    "SessionRecord",
]
