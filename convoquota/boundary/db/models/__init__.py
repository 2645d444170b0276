"""ORM models registered with Base.metadata."""

from convoquota.boundary.db.models.conversation_model import ConversationModel
from convoquota.boundary.db.models.exchange_model import ExchangeModel
from convoquota.boundary.db.models.session_model import SessionModel

__all__ = ["ConversationModel", "ExchangeModel", "SessionModel"]
