"""
Conversation history manager.

Maintains the bounded, order-preserving turn log kept on each session and
renders it as LangChain messages for the assistant prompt.

Dependencies: langchain_core.messages
System role: Rolling context window for prompt continuity
"""

from collections.abc import Iterable, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from convoquota.core.session.records import HistoryEntry

USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"


class ConversationHistoryManager:
    """
    Pure operations over a session's rolling history.

    Holds only the window size; every method takes the current history and
    returns a new tuple, so callers decide when and where it is persisted.
    """

    def __init__(self, window: int = 10) -> None:
        """
        Initialize history manager.

        Args:
            window: Maximum entries kept (10 entries = 5 exchanges)
        """
        if window < 1:
            raise ValueError(f"History window must be positive, got {window}")
        self.window = window

    def append(
        self,
        history: Sequence[HistoryEntry],
        user_turn: HistoryEntry,
        assistant_turn: HistoryEntry,
    ) -> tuple[HistoryEntry, ...]:
        """
        Append one exchange and drop the oldest entries beyond the window.

        Args:
            history: Current history, most recent last
            user_turn: Question entry
            assistant_turn: Answer entry

        Returns:
            tuple[HistoryEntry, ...]: New history of at most `window` entries
        """
        return self.extend(history, (user_turn, assistant_turn))

    def extend(
        self,
        history: Sequence[HistoryEntry],
        entries: Iterable[HistoryEntry],
    ) -> tuple[HistoryEntry, ...]:
        """
        Append entries, skipping ones already recorded for the same exchange.

        Entries without an exchange_id are always appended.

        Args:
            history: Current history, most recent last
            entries: New entries in order

        Returns:
            tuple[HistoryEntry, ...]: Truncated history (FIFO eviction)
        """
        seen = {(entry.exchange_id, entry.role) for entry in history if entry.exchange_id}
        merged = list(history)
        for entry in entries:
            if entry.exchange_id and (entry.exchange_id, entry.role) in seen:
                continue
            merged.append(entry)
        return tuple(merged[-self.window:])

    @staticmethod
    def to_messages(history: Sequence[HistoryEntry]) -> list[BaseMessage]:
        """
        Convert history entries to LangChain chat messages.

        Entries with unknown roles are dropped.

        Args:
            history: History entries, most recent last

        Returns:
            list[BaseMessage]: HumanMessage / AIMessage sequence
        """
        messages: list[BaseMessage] = []
        for entry in history:
            if entry.role == USER_ROLE:
                messages.append(HumanMessage(content=entry.content))
            elif entry.role == ASSISTANT_ROLE:
                messages.append(AIMessage(content=entry.content))
        return messages
