"""
Exchange ORM model.

Immutable question/answer record written once per successful exchange.

Dependencies: sqlalchemy, convoquota.boundary.db.base
System role: Audit log of exchanges
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from convoquota.boundary.db.base import Base, UUIDMixin


class ExchangeModel(Base, UUIDMixin):
    """
    Exchange ORM model.

    Attributes:
        id: UUID primary key (generated by the orchestrator)
        session_id: Session the exchange belongs to
        account_id: Linked account at the time of the exchange
        question_text: User message
        answer_text: Formatted assistant answer
        billable: Classifier verdict
        created_at: Exchange timestamp (UTC)
    """

    __tablename__ = "exchanges"

    session_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    account_id: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    answer_text: Mapped[str] = mapped_column(Text, nullable=False)
    billable: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
