"""
Test suite for KnowledgeRetriever.

System role: Verification of passage filtering and context rendering
"""

from unittest.mock import AsyncMock

from convoquota.boundary.vdb.faiss_store import ScoredPassage
from convoquota.core.retriever import KnowledgeRetriever


def _knowledge_base(*passages: ScoredPassage) -> AsyncMock:
    knowledge_base = AsyncMock()
    knowledge_base.search.return_value = list(passages)
    return knowledge_base


async def test_retrieve_keeps_passages_above_threshold():
    knowledge_base = _knowledge_base(
        ScoredPassage("Header bidding lifts eCPM.", "bidding.md", 0.82),
        ScoredPassage("Exactly at the cut-off.", "edge.md", 0.3),
        ScoredPassage("Unrelated recipe.", "cooking.md", 0.12),
    )
    retriever = KnowledgeRetriever(knowledge_base, top_k=7, score_threshold=0.3)

    passages = await retriever.retrieve("How do I raise eCPM?")

    assert [p.document_name for p in passages] == ["bidding.md"]
    knowledge_base.search.assert_awaited_once_with("How do I raise eCPM?", k=7)


async def test_context_tags_source_and_relevance():
    retriever = KnowledgeRetriever(_knowledge_base(
        ScoredPassage("Header bidding lifts eCPM.", "bidding.md", 0.823),
        ScoredPassage("Floors between $2 and $5 work for tier 1.", "floors.md", 0.5),
    ))

    context = await retriever.context_for("eCPM tips")

    assert context == (
        "[bidding.md - Relevance: 82.3%]\nHeader bidding lifts eCPM."
        "\n---\n"
        "[floors.md - Relevance: 50.0%]\nFloors between $2 and $5 work for tier 1."
    )


async def test_context_is_empty_without_relevant_passages():
    retriever = KnowledgeRetriever(_knowledge_base(ScoredPassage("Noise", "noise.md", 0.1)))
    assert await retriever.context_for("eCPM tips") == ""
