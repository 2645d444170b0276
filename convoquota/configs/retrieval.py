"""
Knowledge-base retrieval configuration settings.

Location of the local FAISS index, the embedding model and the relevance
cut-off for passages injected into the assistant prompt.

Dependencies: pydantic, pydantic_settings
System role: Retrieval configuration
"""

from pydantic import Field

from convoquota.configs.base import BaseSettings, env_config


class RetrievalSettings(BaseSettings):
    """Knowledge-base retrieval configuration."""

    model_config = env_config("RETRIEVAL_")

    enabled: bool = Field(default=True, description="Inject knowledge-base passages into prompts")
    index_directory: str = Field(default=".faiss_index", description="FAISS index persistence directory")
    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google GenAI embedding model id",
    )
    top_k: int = Field(default=7, ge=1, description="Passages fetched per question")
    score_threshold: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Passages must score above this relevance to be used",
    )
    chunk_size: int = Field(default=1000, ge=100, description="Characters per indexed passage")
    chunk_overlap: int = Field(default=200, ge=0, description="Overlap between consecutive passages")
