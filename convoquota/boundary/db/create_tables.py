"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, convoquota.configs
System role: Database schema initialization

Usage:
    python -m convoquota.boundary.db.create_tables
"""

import asyncio

from sqlalchemy.ext.asyncio import AsyncEngine

from convoquota.boundary.db.base import Base
from convoquota.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from convoquota.boundary.db.models.conversation_model import ConversationModel  # noqa: F401
from convoquota.boundary.db.models.exchange_model import ExchangeModel  # noqa: F401
from convoquota.boundary.db.models.session_model import SessionModel  # noqa: F401


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: calls CREATE TABLE IF NOT EXISTS for each model, so safe
    to run multiple times. Existing tables remain unchanged.

    Args:
        engine: Engine to use (created from settings if omitted)

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def _main() -> None:
    engine = get_async_engine()
    try:
        await create_all_tables(engine)
        print("All tables created successfully.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(_main())
