"""
Session ORM model.

Represents a visitor session: usage counter, rolling history and the
optional linked account.

Dependencies: sqlalchemy, convoquota.boundary.db.base
System role: Session persistence for quota and context management
"""

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from convoquota.boundary.db.base import Base, TimestampMixin


class SessionModel(Base, TimestampMixin):
    """
    Session ORM model keyed by the client-held session token.

    usage_count is only written through a conditional UPDATE on its previous
    value. revision is bumped on every write and guards history rewrites.

    Attributes:
        id: Opaque client-supplied session identifier (primary key)
        usage_count: Billable exchanges consumed
        linked_account_id: Account id once the visitor authenticates
        captured_email: Contact email left by the visitor
        history: Rolling list of {role, content, exchange_id} dicts
        revision: Optimistic-lock version
        created_at: Session creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)
    """

    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    usage_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Billable exchanges charged against the free tier",
    )

    linked_account_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default=None,
        index=True,
        doc="Linked account; a linked session is unmetered",
    )

    captured_email: Mapped[str | None] = mapped_column(
        String(320),
        nullable=True,
        default=None,
        doc="Contact email left by the visitor, latest wins",
    )

    history: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Rolling conversation history, most recent last",
    )

    revision: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
