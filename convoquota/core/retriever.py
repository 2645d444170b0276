"""
Knowledge-base retrieval for the assistant prompt.

Keeps only passages scoring above the relevance threshold and renders
them as one context block, each passage tagged with its source document
and relevance.

Dependencies: convoquota.boundary.vdb
System role: RAG retrieval business logic
"""

import logging
from typing import Protocol

from convoquota.boundary.vdb.faiss_store import ScoredPassage

logger = logging.getLogger(__name__)

PASSAGE_SEPARATOR = "\n---\n"


class KnowledgeBase(Protocol):
    async def search(self, query: str, k: int = 7) -> list[ScoredPassage]: ...


class KnowledgeRetriever:
    """Retrieval business logic."""

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        top_k: int = 7,
        score_threshold: float = 0.3,
    ) -> None:
        """
        Initialize retriever.

        Args:
            knowledge_base: Searchable passage index
            top_k: Passages fetched per question
            score_threshold: Passages must score strictly above this
        """
        self.knowledge_base = knowledge_base
        self.top_k = top_k
        self.score_threshold = score_threshold

    async def retrieve(self, query: str) -> list[ScoredPassage]:
        """
        Retrieve relevant passages.

        Args:
            query: User question

        Returns:
            list[ScoredPassage]: Passages above the threshold, in search order
        """
        passages = await self.knowledge_base.search(query, k=self.top_k)
        relevant = [p for p in passages if p.score > self.score_threshold]
        logger.info(
            f"{__name__}:retrieve - found={len(passages)}, relevant={len(relevant)}"
        )
        return relevant

    @staticmethod
    def format_context(passages: list[ScoredPassage]) -> str:
        return PASSAGE_SEPARATOR.join(
            f"[{p.document_name} - Relevance: {p.score * 100:.1f}%]\n{p.content}"
            for p in passages
        )

    async def context_for(self, query: str) -> str:
        """Render the relevant passages for a question; empty when none qualify."""
        return self.format_context(await self.retrieve(query))
