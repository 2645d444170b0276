"""
Test suite for FAISSKnowledgeBase.

Uses LangChain's deterministic fake embeddings and a temporary index
directory, so no network calls are made.

System role: Verification of knowledge-base indexing and search
"""

from langchain_core.embeddings import DeterministicFakeEmbedding

from convoquota.boundary.vdb.faiss_store import FAISSKnowledgeBase

PASSAGE = "Adding a second bidder to the waterfall typically lifts eCPM by 15 to 30 percent."


def _knowledge_base(directory) -> FAISSKnowledgeBase:
    return FAISSKnowledgeBase(
        persist_directory=str(directory),
        embeddings=DeterministicFakeEmbedding(size=32),
        chunk_size=200,
        chunk_overlap=0,
    )


async def test_search_on_empty_index_returns_nothing(tmp_path):
    knowledge_base = _knowledge_base(tmp_path / "index")
    assert knowledge_base.is_empty
    assert await knowledge_base.search("eCPM") == []


async def test_indexed_passage_is_found_with_its_source(tmp_path):
    knowledge_base = _knowledge_base(tmp_path / "index")
    assert knowledge_base.add_text(PASSAGE, document_name="bidding.md") == 1

    passages = await knowledge_base.search(PASSAGE, k=1)

    assert len(passages) == 1
    assert passages[0].content == PASSAGE
    assert passages[0].document_name == "bidding.md"
    assert passages[0].score > 0.99


async def test_index_persists_across_instances(tmp_path):
    _knowledge_base(tmp_path / "index").add_text(PASSAGE, document_name="bidding.md")

    reopened = _knowledge_base(tmp_path / "index")

    assert not reopened.is_empty
    passages = await reopened.search(PASSAGE, k=1)
    assert passages[0].document_name == "bidding.md"


def test_long_documents_are_split_into_passages(tmp_path):
    knowledge_base = _knowledge_base(tmp_path / "index")
    text = "\n\n".join(f"Section {i}: " + "floor pricing advice " * 8 for i in range(5))

    assert knowledge_base.add_text(text, document_name="floors.md") >= 5
    assert knowledge_base.add_text("   ", document_name="blank.md") == 0
