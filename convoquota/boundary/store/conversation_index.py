"""
Conversation index contract.

Linked accounts get a list of their conversations, one entry per session,
titled after the first question.

Dependencies: abc, convoquota.core.session
System role: Persistence contract for the per-account conversation list
"""

from abc import ABC, abstractmethod

from convoquota.core.session.records import ConversationRecord

TITLE_MAX_LENGTH = 50


def conversation_title(question: str) -> str:
    """Return the first 50 characters of the question, with "..." if cut."""
    question = question.strip()
    if len(question) > TITLE_MAX_LENGTH:
        return question[:TITLE_MAX_LENGTH] + "..."
    return question


class ConversationIndex(ABC):
    """Per-account conversation list."""

    @abstractmethod
    async def record_exchange(
        self,
        account_id: str,
        session_id: str,
        question: str,
    ) -> ConversationRecord:
        """Create the conversation on first exchange, else bump count and last message."""

    @abstractmethod
    async def list_for_account(self, account_id: str, limit: int = 50) -> list[ConversationRecord]:
        """Return the account's conversations, most recently updated first."""

    @abstractmethod
    async def get(self, account_id: str, conversation_id: str) -> ConversationRecord | None:
        """Return the conversation if it exists and belongs to the account."""

    @abstractmethod
    async def delete(self, account_id: str, conversation_id: str) -> bool:
        """Delete the conversation if it belongs to the account."""
