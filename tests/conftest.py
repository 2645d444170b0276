"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite session factory, in-memory stores, quota enforcer,
canned answers and an inference stub factory
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import pytest

BILLABLE_ANSWER = (
    "Here is a plan to lift your ad revenue this quarter.\n"
    "1. Raise your rewarded video floor from $8 to $10 eCPM in the top 3 geos.\n"
    "2. Add a second bidding network so at least 4 buyers compete per request.\n"
    "3. Cap interstitials at 1 per 3 minutes to protect day 7 retention.\n"
    "Track ARPDAU daily and review the results after 14 days before changing floors again."
)

CLARIFYING_ANSWER = "What is your current monthly traffic? Which platform do you use to sell today?"


@pytest.fixture
async def session_factory():
    """
    Create in-memory SQLite async session factory for testing.

    Yields:
        async_sessionmaker: Factory bound to a fresh schema (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from convoquota.boundary.db.base import Base
    from convoquota.boundary.db.create_tables import create_all_tables

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    await create_all_tables(engine)

    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def history_manager():
    """Provide the default 10-entry history window."""
    from convoquota.core.history import ConversationHistoryManager

    return ConversationHistoryManager(window=10)


@pytest.fixture
def memory_store(history_manager):
    """Provide an empty in-memory session store."""
    from convoquota.boundary.store.memory_session_store import InMemorySessionStore

    return InMemorySessionStore(history_manager)


@pytest.fixture
def conversation_index():
    """Provide an empty in-memory conversation index."""
    from convoquota.boundary.store.memory_conversation_index import InMemoryConversationIndex

    return InMemoryConversationIndex()


@pytest.fixture
def enforcer(memory_store):
    """Provide a quota enforcer with the default limit of 10."""
    from convoquota.core.quota_enforcer import QuotaEnforcer

    return QuotaEnforcer(memory_store, limit=10, retry_budget=3)


@pytest.fixture
def scripted_inference():
    """
    Build an inference stub that returns the given answers in order.

    Returns:
        Callable: factory(answers) -> async inference function recording its calls
    """

    def factory(*answers: str):
        remaining = list(answers)
        calls = []

        async def inference(context):
            calls.append(context)
            return remaining.pop(0) if len(remaining) > 1 else remaining[0]

        inference.calls = calls
        return inference

    return factory


@pytest.fixture
async def file_session_factory(tmp_path):
    """
    Create a file-backed SQLite session factory.

    Each session gets its own pooled connection, so concurrent tasks really
    interleave their reads and conditional writes.

    Yields:
        async_sessionmaker: Factory bound to a fresh schema in tmp_path
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

    from convoquota.boundary.db.create_tables import create_all_tables

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'convoquota.db'}",
        connect_args={"timeout": 30},
    )
    await create_all_tables(engine)

    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    await engine.dispose()
