"""
Conversation ORM model.

Per-account index of conversations, one row per (account, session).

Dependencies: sqlalchemy, convoquota.boundary.db.base
System role: Conversation list for linked accounts
"""

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from convoquota.boundary.db.base import Base, TimestampMixin, UUIDMixin


class ConversationModel(Base, UUIDMixin, TimestampMixin):
    """
    Conversation index entry.

    Attributes:
        id: UUID primary key
        account_id: Owning account
        session_id: Session holding the exchanges
        title: First question, truncated to 50 characters
        last_message: Most recent question
        message_count: Exchanges recorded for the conversation
    """

    __tablename__ = "conversations"
    __table_args__ = (UniqueConstraint("account_id", "session_id", name="uq_conversation_account_session"),)

    account_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    session_id: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(64), nullable=False)
    last_message: Mapped[str] = mapped_column(Text, nullable=False)
    message_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
