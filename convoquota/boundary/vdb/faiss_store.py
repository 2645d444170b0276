"""
Local FAISS knowledge base.

Holds the reference material the assistant answers from: plain-text
documents split into overlapping passages, embedded and persisted in a
local FAISS index. Searched once per question.

Run `python -m convoquota.boundary.vdb.faiss_store <file> [<file> ...]`
to index documents.

Dependencies: langchain_community.vectorstores, langchain_text_splitters, langchain_google_genai
System role: Knowledge-base vector store
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from langchain_community.vectorstores import FAISS
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from langchain_text_splitters import RecursiveCharacterTextSplitter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredPassage:
    """
    Indexed passage with its relevance to a query.

    Attributes:
        content: Passage text
        document_name: Name of the source document
        score: Relevance in [0, 1], higher is closer
    """

    content: str
    document_name: str
    score: float


class FAISSKnowledgeBase:
    """
    Local FAISS index of knowledge-base passages.

    The index is loaded from persist_directory when present; until the
    first documents are added every search returns no passages.
    """

    def __init__(
        self,
        persist_directory: str = ".faiss_index",
        embeddings: Embeddings | None = None,
        embedding_model: str = "models/gemini-embedding-001",
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
    ) -> None:
        """
        Initialize the knowledge base.

        Args:
            persist_directory: Directory for FAISS index persistence
            embeddings: Embedding model (Google GenAI built from embedding_model when omitted)
            embedding_model: Google GenAI embedding model id
            chunk_size: Characters per passage
            chunk_overlap: Overlap between consecutive passages
        """
        self._persist_dir = Path(persist_directory)

        if embeddings is None:
            from langchain_google_genai import GoogleGenerativeAIEmbeddings

            load_dotenv()
            embeddings = GoogleGenerativeAIEmbeddings(model=embedding_model)
        self._embeddings = embeddings

        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            length_function=len,
            separators=["\n\n", "\n", " ", ""],
        )

        self._index: FAISS | None = None
        self._load_index()

    def _load_index(self) -> None:
        """Load an existing index from disk."""
        if (self._persist_dir / "index.faiss").exists():
            self._index = FAISS.load_local(
                str(self._persist_dir),
                self._embeddings,
                allow_dangerous_deserialization=True,
            )
            logger.info(f"{__name__}:_load_index - loaded index from {self._persist_dir}")

    @property
    def is_empty(self) -> bool:
        return self._index is None

    def add_text(self, text: str, document_name: str) -> int:
        """
        Split a document into passages, index and persist them.

        Args:
            text: Full document text
            document_name: Name shown next to passages taken from it

        Returns:
            int: Number of passages added
        """
        documents = [
            Document(page_content=chunk, metadata={"document_name": document_name})
            for chunk in self._splitter.split_text(text)
            if chunk.strip()
        ]
        if not documents:
            return 0

        if self._index is None:
            self._index = FAISS.from_documents(documents, self._embeddings)
        else:
            self._index.add_documents(documents)

        self._persist_dir.mkdir(parents=True, exist_ok=True)
        self._index.save_local(str(self._persist_dir))
        logger.info(
            f"{__name__}:add_text - document={document_name}, passages={len(documents)}"
        )
        return len(documents)

    async def search(self, query: str, k: int = 7) -> list[ScoredPassage]:
        """
        Find the passages closest to a query.

        Args:
            query: Search text
            k: Number of passages to return

        Returns:
            list[ScoredPassage]: Closest passages, most relevant first
        """
        if self._index is None:
            return []

        results = await self._index.asimilarity_search_with_relevance_scores(query, k=k)
        return [
            ScoredPassage(
                content=doc.page_content,
                document_name=doc.metadata.get("document_name", "unknown"),
                score=float(score),
            )
            for doc, score in results
        ]


def _main(paths: list[str]) -> None:
    from convoquota.configs import get_settings

    retrieval = get_settings().retrieval
    knowledge_base = FAISSKnowledgeBase(
        persist_directory=retrieval.index_directory,
        embedding_model=retrieval.embedding_model,
        chunk_size=retrieval.chunk_size,
        chunk_overlap=retrieval.chunk_overlap,
    )
    for path in map(Path, paths):
        added = knowledge_base.add_text(path.read_text(encoding="utf-8"), document_name=path.name)
        print(f"Indexed {path.name}: {added} passages")


if __name__ == "__main__":
    _main(sys.argv[1:])
