"""
Vector Store module for docindex.

Provides Qdrant-based storage and nearest-neighbour retrieval of document
chunks.
"""

from pathlib import Path
from typing import Optional

from .base import (
    ChunkRecord,
    DimensionMismatchError,
    SearchFilters,
    SearchResult,
    VectorStoreError,
    VectorStoreInterface,
)
from .qdrant import QdrantVectorStore, point_id

__all__ = [
    "ChunkRecord",
    "DimensionMismatchError",
    "SearchFilters",
    "SearchResult",
    "VectorStoreError",
    "VectorStoreInterface",
    "QdrantVectorStore",
    "create_vector_store",
    "point_id",
]


def create_vector_store(
    collection_name: str = "chunks",
    vector_size: int = 384,
    path: Optional[Path | str] = None,
    url: Optional[str] = None,
    api_key: Optional[str] = None,
) -> VectorStoreInterface:
    """
    Factory function to create a vector store.

    Args:
        collection_name: Name of the collection
        vector_size: Dimension of embedding vectors
        path: Directory of the embedded on-disk store
        url: Qdrant server URL (takes precedence over path)
        api_key: Optional API key for the server

    Returns:
        Configured VectorStoreInterface instance
    """
    return QdrantVectorStore(
        collection_name=collection_name,
        vector_size=vector_size,
        path=path,
        url=url,
        api_key=api_key,
    )
