"""Knowledge-base vector store."""

from convoquota.boundary.vdb.faiss_store import FAISSKnowledgeBase, ScoredPassage

__all__ = ["FAISSKnowledgeBase", "ScoredPassage"]
