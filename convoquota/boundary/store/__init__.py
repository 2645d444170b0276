"""Session store and conversation index implementations."""

from convoquota.boundary.store.conversation_index import ConversationIndex
from convoquota.boundary.store.memory_conversation_index import InMemoryConversationIndex
from convoquota.boundary.store.memory_session_store import InMemorySessionStore
from convoquota.boundary.store.session_store import SessionStore
from convoquota.boundary.store.sql_conversation_index import SqlConversationIndex
from convoquota.boundary.store.sql_session_store import SqlSessionStore

__all__ = [
    "ConversationIndex",
    "InMemoryConversationIndex",
    "InMemorySessionStore",
    "SessionStore",
    "SqlConversationIndex",
    "SqlSessionStore",
]
