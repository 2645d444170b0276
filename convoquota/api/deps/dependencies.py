"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived collaborators
(stores, enforcer, classifier, agent, account resolver) are built once per
process and shared; services are cheap and built per request.

Dependencies: convoquota.configs, convoquota.application, convoquota.boundary, convoquota.core
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncEngine

from convoquota.application.adapters.account_resolver import JWTAccountResolver, parse_bearer
from convoquota.application.services import ConversationService, ExchangeService, SessionService
from convoquota.boundary.store.conversation_index import ConversationIndex
from convoquota.boundary.store.session_store import SessionStore
from convoquota.configs import Settings, get_settings
from convoquota.core.classifier import HeuristicAnswerClassifier
from convoquota.core.history import ConversationHistoryManager
from convoquota.core.quota_enforcer import QuotaEnforcer


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._history_manager = None
        self._engine = None
        self._session_store = None
        self._conversation_index = None
        self._quota_enforcer = None
        self._classifier = None
        self._assistant_agent = None
        self._knowledge_retriever = None
        self._account_resolver = None

    @property
    def history_manager(self) -> ConversationHistoryManager:
        """Get cached history window policy."""
        if self._history_manager is None:
            settings = get_settings()
            self._history_manager = ConversationHistoryManager(window=settings.quota.history_window)
        return self._history_manager

    @property
    def engine(self) -> AsyncEngine | None:
        """Get cached database engine (None for the in-memory backend)."""
        if self._engine is None and get_settings().store.backend == "sql":
            from convoquota.boundary.db.connection import get_async_engine
            self._engine = get_async_engine()
        return self._engine

    def _build_stores(self) -> None:
        from convoquota.boundary.db.connection import get_async_session_factory
        from convoquota.boundary.store.store_factory import build_stores

        engine = self.engine
        session_factory = get_async_session_factory(engine) if engine is not None else None
        self._session_store, self._conversation_index = build_stores(
            self.history_manager,
            session_factory=session_factory,
        )

    @property
    def session_store(self) -> SessionStore:
        """Get cached session store."""
        if self._session_store is None:
            self._build_stores()
        return self._session_store

    @property
    def conversation_index(self) -> ConversationIndex:
        """Get cached conversation index."""
        if self._conversation_index is None:
            self._build_stores()
        return self._conversation_index

    @property
    def quota_enforcer(self) -> QuotaEnforcer:
        """Get cached quota enforcer."""
        if self._quota_enforcer is None:
            quota = get_settings().quota
            self._quota_enforcer = QuotaEnforcer(
                store=self.session_store,
                limit=quota.limit,
                retry_budget=quota.retry_budget,
                unmetered_session_ids=quota.unmetered_session_ids,
                retry_backoff=quota.retry_backoff_seconds,
            )
        return self._quota_enforcer

    @property
    def classifier(self) -> HeuristicAnswerClassifier:
        """Get cached answer classifier."""
        if self._classifier is None:
            self._classifier = HeuristicAnswerClassifier.from_settings(get_settings().classifier)
        return self._classifier

    @property
    def knowledge_retriever(self):
        """Get cached knowledge-base retriever (None when retrieval is disabled)."""
        retrieval = get_settings().retrieval
        if self._knowledge_retriever is None and retrieval.enabled:
            from convoquota.boundary.vdb.faiss_store import FAISSKnowledgeBase
            from convoquota.core.retriever import KnowledgeRetriever

            knowledge_base = FAISSKnowledgeBase(
                persist_directory=retrieval.index_directory,
                embedding_model=retrieval.embedding_model,
                chunk_size=retrieval.chunk_size,
                chunk_overlap=retrieval.chunk_overlap,
            )
            self._knowledge_retriever = KnowledgeRetriever(
                knowledge_base,
                top_k=retrieval.top_k,
                score_threshold=retrieval.score_threshold,
            )
        return self._knowledge_retriever

    @property
    def assistant_agent(self):
        """Get cached assistant agent."""
        if self._assistant_agent is None:
            from convoquota.core.agentic_system.agent.assistant_agent import AssistantAgent

            inference = get_settings().inference
            self._assistant_agent = AssistantAgent(
                model_id=inference.model_id,
                temperature=inference.temperature,
                max_tokens=inference.max_tokens,
                retriever=self.knowledge_retriever,
            )
        return self._assistant_agent

    @property
    def account_resolver(self) -> JWTAccountResolver:
        """Get cached account resolver."""
        if self._account_resolver is None:
            auth = get_settings().auth
            self._account_resolver = JWTAccountResolver(
                secret=auth.jwt_secret,
                algorithm=auth.jwt_algorithm,
            )
        return self._account_resolver

    def clear(self) -> None:
        """Clear all cached instances."""
        self._history_manager = None
        self._engine = None
        self._session_store = None
        self._conversation_index = None
        self._quota_enforcer = None
        self._classifier = None
        self._assistant_agent = None
        self._knowledge_retriever = None
        self._account_resolver = None

    async def aclose(self) -> None:
        """Dispose the engine and clear all cached instances."""
        if self._engine is not None:
            await self._engine.dispose()
        self.clear()


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_account_id(authorization: str | None = Header(default=None)) -> str | None:
    """
    Resolve the linked account from the Authorization header.

    Args:
        authorization: Raw "Bearer <token>" header (injected)

    Returns:
        str | None: Account id, None for anonymous or invalid credentials
    """
    return get_service_cache().account_resolver.resolve(parse_bearer(authorization))


def require_account_id(account_id: str | None = Depends(get_account_id)) -> str:
    """
    Require a linked account.

    Raises:
        HTTPException(401): No valid bearer credential
    """
    if account_id is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return account_id


def get_session_service() -> SessionService:
    """
    Get session service instance.

    Returns:
        SessionService: Session service bound to the shared store
    """
    cache = get_service_cache()
    return SessionService(store=cache.session_store, enforcer=cache.quota_enforcer)


def get_exchange_service() -> ExchangeService:
    """
    Get exchange service instance with the assistant agent.

    Returns:
        ExchangeService: Exchange orchestrator with configured collaborators
    """
    cache = get_service_cache()
    return ExchangeService(
        store=cache.session_store,
        enforcer=cache.quota_enforcer,
        classifier=cache.classifier,
        inference=cache.assistant_agent,
        conversation_index=cache.conversation_index,
        inference_timeout=get_settings().inference.timeout_seconds,
    )


def get_conversation_service() -> ConversationService:
    """
    Get conversation service instance.

    Returns:
        ConversationService: Conversation list service
    """
    cache = get_service_cache()
    return ConversationService(store=cache.session_store, conversation_index=cache.conversation_index)


def get_session_store() -> SessionStore:
    """Get the shared session store (used by health checks)."""
    return get_service_cache().session_store
