"""
Store factory for selecting between the SQL and in-memory backends.

Depends on STORE_BACKEND environment variable.
Provides consistent interface regardless of underlying implementation.

Dependencies: convoquota.boundary.store, convoquota.boundary.db, convoquota.configs
System role: Store instantiation and selection
"""

import logging

from sqlalchemy.ext.asyncio import async_sessionmaker

from convoquota.boundary.db.connection import get_async_session_factory
from convoquota.boundary.store.conversation_index import ConversationIndex
from convoquota.boundary.store.memory_conversation_index import InMemoryConversationIndex
from convoquota.boundary.store.memory_session_store import InMemorySessionStore
from convoquota.boundary.store.session_store import SessionStore
from convoquota.boundary.store.sql_conversation_index import SqlConversationIndex
from convoquota.boundary.store.sql_session_store import SqlSessionStore
from convoquota.configs import get_settings
from convoquota.core.history import ConversationHistoryManager

logger = logging.getLogger(__name__)


def build_stores(
    history_manager: ConversationHistoryManager,
    session_factory: async_sessionmaker | None = None,
) -> tuple[SessionStore, ConversationIndex]:
    """
    Build the session store and conversation index from configuration.

    Args:
        history_manager: Window policy shared with the orchestrator
        session_factory: Optional factory override for the SQL backend

    Returns:
        tuple[SessionStore, ConversationIndex]: Matching store pair

    Raises:
        ValueError: If STORE_BACKEND is invalid
    """
    settings = get_settings()
    backend = settings.store.backend.lower()

    if backend == "memory":
        logger.info(f"{__name__}:build_stores - Creating in-memory stores (single process)")
        return InMemorySessionStore(history_manager), InMemoryConversationIndex()

    elif backend == "sql":
        logger.info(f"{__name__}:build_stores - Creating SQL stores")
        factory = session_factory or get_async_session_factory()
        return (
            SqlSessionStore(factory, history_manager, retry_budget=settings.quota.retry_budget),
            SqlConversationIndex(factory),
        )

    else:
        raise ValueError(
            f"Invalid STORE_BACKEND: {backend}. Must be 'sql' or 'memory'."
        )
