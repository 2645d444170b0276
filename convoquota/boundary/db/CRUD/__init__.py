"""CRUD singletons for the ORM models."""

from convoquota.boundary.db.CRUD.conversation_crud import conversation_crud
from convoquota.boundary.db.CRUD.exchange_crud import exchange_crud
from convoquota.boundary.db.CRUD.session_crud import session_crud

__all__ = ["conversation_crud", "exchange_crud", "session_crud"]
