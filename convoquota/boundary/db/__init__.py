"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
- Base: Declarative base with all models registered
- get_async_engine / get_async_session_factory: connection lifecycle
"""

from convoquota.boundary.db.base import Base
from convoquota.boundary.db.connection import get_async_engine, get_async_session_factory
from convoquota.boundary.db.models import ConversationModel, ExchangeModel, SessionModel

__all__ = [
    "Base",
    "ConversationModel",
    "ExchangeModel",
    "SessionModel",
    "get_async_engine",
    "get_async_session_factory",
]
