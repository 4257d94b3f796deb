"""
Search Service for docindex.

Provides semantic search and statistics over an indexed documentation tree.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from docindex.infrastructure.embedding import EmbeddingClientInterface
from docindex.infrastructure.index_state import IndexStateStore
from docindex.infrastructure.vector_store import (
    SearchFilters,
    SearchResult,
    VectorStoreInterface,
)

logger = logging.getLogger(__name__)


@dataclass
class IndexStats:
    """Aggregate statistics of an index."""

    total_chunks: int = 0
    libraries: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)
    indexed_files: int = 0
    last_updated: Optional[str] = None

    @property
    def unique_libraries(self) -> int:
        return len(self.libraries)

    @property
    def unique_topics(self) -> int:
        return len(self.topics)


class SearchService:
    """
    Service for semantic documentation search.

    Embeds the query with the client used for indexing and returns the nearest
    stored chunks, optionally restricted by equality filters.
    """

    def __init__(
        self,
        embedding_client: EmbeddingClientInterface,
        vector_store: VectorStoreInterface,
        state_store: Optional[IndexStateStore] = None,
        default_limit: int = 10,
    ):
        """
        Initialize the search service.

        Args:
            embedding_client: Client for generating query embeddings
            vector_store: Store for vector search
            state_store: Fingerprint store, used only for statistics
            default_limit: Number of results when no limit is given
        """
        self._embedding_client = embedding_client
        self._vector_store = vector_store
        self._state_store = state_store
        self._default_limit = default_limit

    async def search(
        self,
        query: str,
        limit: Optional[int] = None,
        filters: Optional[SearchFilters] = None,
    ) -> list[SearchResult]:
        """
        Search for chunks relevant to a query.

        Args:
            query: Natural language query
            limit: Maximum number of results (default_limit when None)
            filters: Optional library/difficulty/topic equality filters

        Returns:
            Results ordered by distance ascending

        Raises:
            ValueError: If the query is blank or limit is not positive
            EmbeddingClientError: If the query cannot be embedded
            DimensionMismatchError: If the query embedding does not fit the store
        """
        if not query or not query.strip():
            raise ValueError("Query must not be empty")
        limit = self._default_limit if limit is None else limit
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        query_vector = await self._embedding_client.embed(query)
        results = await self._vector_store.search(query_vector, limit=limit, filters=filters)
        results.sort(key=lambda r: r.distance)

        logger.debug(
            f"Search returned {len(results)} results",
            extra={"limit": limit, "filters": filters.as_dict() if filters else {}},
        )
        return results[:limit]

    async def get_stats(self) -> IndexStats:
        """Collect chunk, library, topic and file statistics for the index."""
        store_stats = await self._vector_store.get_stats()
        stats = IndexStats(
            total_chunks=store_stats.get("total_chunks", 0),
            libraries=list(store_stats.get("libraries", [])),
            topics=list(store_stats.get("topics", [])),
            indexed_files=store_stats.get("files", 0),
        )
        if self._state_store is not None:
            state = self._state_store.load()
            stats.indexed_files = len(state.files)
            stats.last_updated = state.last_updated
        return stats
