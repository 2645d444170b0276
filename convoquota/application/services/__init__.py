"""Service orchestrators."""

from .conversation_service import ConversationService
from .exchange_service import ExchangeResult, ExchangeService, ExchangeState, ExchangeStatus
from .session_service import SessionService

__all__ = [
    "ConversationService",
    "ExchangeResult",
    "ExchangeService",
    "ExchangeState",
    "ExchangeStatus",
    "SessionService",
]
