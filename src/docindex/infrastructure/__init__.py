"""
Infrastructure layer for docindex.

Adapters for the external collaborators: embedding models, the Qdrant vector
store, text/PDF extraction and the index state file.
"""

from .embedding import (
    EmbeddingClientError,
    EmbeddingClientInterface,
    FastEmbedClient,
    OpenAIEmbeddingClient,
    ZeroVectorFallbackClient,
    create_embedding_client,
)
from .index_state import IndexStateError, IndexStateStore
from .text_extractor import DocumentTextExtractor, ExtractionError, TextExtractorInterface
from .vector_store import (
    ChunkRecord,
    DimensionMismatchError,
    QdrantVectorStore,
    SearchFilters,
    SearchResult,
    VectorStoreError,
    VectorStoreInterface,
    create_vector_store,
)

__all__ = [
    # Embedding
    "EmbeddingClientInterface",
    "EmbeddingClientError",
    "FastEmbedClient",
    "OpenAIEmbeddingClient",
    "ZeroVectorFallbackClient",
    "create_embedding_client",
    # Vector store
    "VectorStoreInterface",
    "VectorStoreError",
    "DimensionMismatchError",
    "QdrantVectorStore",
    "ChunkRecord",
    "SearchFilters",
    "SearchResult",
    "create_vector_store",
    # Extraction
    "TextExtractorInterface",
    "DocumentTextExtractor",
    "ExtractionError",
    # Index state
    "IndexStateStore",
    "IndexStateError",
]
