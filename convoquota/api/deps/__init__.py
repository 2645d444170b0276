"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_account_id,
    get_conversation_service,
    get_exchange_service,
    get_service_cache,
    get_session_service,
    get_session_store,
    get_settings_dependency,
    require_account_id,
)

__all__ = [
    "get_account_id",
    "get_conversation_service",
    "get_exchange_service",
    "get_service_cache",
    "get_session_service",
    "get_session_store",
    "get_settings_dependency",
    "require_account_id",
]
