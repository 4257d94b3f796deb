"""
Fake implementations for testing.

Provides in-memory implementations of infrastructure interfaces
for use in unit and integration tests without models or Qdrant.
"""

from __future__ import annotations

import hashlib
import math
from collections.abc import Callable
from typing import Optional

from docindex.infrastructure.embedding import EmbeddingClientError, EmbeddingClientInterface
from docindex.infrastructure.vector_store import (
    ChunkRecord,
    DimensionMismatchError,
    SearchFilters,
    SearchResult,
    VectorStoreError,
    VectorStoreInterface,
)


def _cosine_distance(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 1.0
    return 1.0 - dot / (norm_a * norm_b)


class InMemoryVectorStore(VectorStoreInterface):
    """
    In-memory vector store for testing.

    Implements VectorStoreInterface without requiring Qdrant.
    Uses cosine distance for search. Setting ``fail_writes`` makes every
    mutation raise VectorStoreError, which simulates a lost connection.
    """

    def __init__(self, vector_size: int = 384, collection_name: str = "chunks"):
        self._vector_size = vector_size
        self._collection_name = collection_name
        self._rows: dict[str, ChunkRecord] = {}
        self.fail_writes = False
        self.insert_calls = 0
        self.delete_calls = 0

    async def initialize(self) -> None:
        return None

    def _check_writable(self) -> None:
        if self.fail_writes:
            raise VectorStoreError("Simulated vector store failure")

    async def insert(self, records: list[ChunkRecord]) -> None:
        self._check_writable()
        for record in records:
            if len(record.vector) != self._vector_size:
                raise DimensionMismatchError(self._vector_size, len(record.vector))
        self.insert_calls += 1
        for record in records:
            self._rows[record.id] = record

    async def delete_by_file(self, relative_path: str) -> int:
        self._check_writable()
        self.delete_calls += 1
        doomed = [
            row_id
            for row_id, record in self._rows.items()
            if record.original_file_path == relative_path
        ]
        for row_id in doomed:
            del self._rows[row_id]
        return len(doomed)

    async def search(
        self,
        query_vector: list[float],
        limit: int = 10,
        filters: Optional[SearchFilters] = None,
    ) -> list[SearchResult]:
        if len(query_vector) != self._vector_size:
            raise DimensionMismatchError(self._vector_size, len(query_vector))

        results = []
        for record in self._rows.values():
            payload = record.to_payload()
            if filters is not None and not filters.matches(payload):
                continue
            distance = _cosine_distance(query_vector, record.vector)
            results.append(SearchResult.from_payload(payload, distance=distance))

        results.sort(key=lambda r: (r.distance, r.chunk_id))
        return results[:limit]

    async def get_stats(self) -> dict:
        records = list(self._rows.values())
        return {
            "total_chunks": len(records),
            "libraries": sorted({r.library_id for r in records}),
            "topics": sorted({r.topic_name for r in records if r.topic_name}),
            "files": len({r.original_file_path for r in records}),
            "collection_name": self._collection_name,
            "vector_size": self._vector_size,
        }

    async def drop(self) -> None:
        self._check_writable()
        self._rows.clear()

    def records(self) -> list[ChunkRecord]:
        """All stored rows ordered by file then chunk order (test helper)."""
        return sorted(self._rows.values(), key=lambda r: (r.original_file_path, r.order))

    def rows_for(self, relative_path: str) -> list[ChunkRecord]:
        return [r for r in self.records() if r.original_file_path == relative_path]


class LocalEmbeddingClient(EmbeddingClientInterface):
    """
    Deterministic embedding client for testing.

    Vectors are derived from the SHA-256 of the text, so the same text always
    maps to the same unit vector. No model download or API call is required.
    """

    def __init__(
        self,
        dimension: int = 384,
        fail_when: Optional[Callable[[str], bool]] = None,
    ):
        """
        Args:
            dimension: Dimension of embedding vectors to generate
            fail_when: Predicate on a text; a batch containing a matching text
                raises EmbeddingClientError
        """
        self._dimension = dimension
        self._fail_when = fail_when
        self.embedded_texts: list[str] = []

    def get_dimension(self) -> int:
        return self._dimension

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if self._fail_when is not None and any(self._fail_when(t) for t in texts):
            raise EmbeddingClientError("Simulated embedding failure")
        self.embedded_texts.extend(texts)
        return [self.vector_for(text) for text in texts]

    def vector_for(self, text: str) -> list[float]:
        """Deterministic unit vector for a text."""
        vector: list[float] = []
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        while len(vector) < self._dimension:
            vector.extend((byte / 127.5) - 1.0 for byte in digest)
            digest = hashlib.sha256(digest).digest()
        vector = vector[: self._dimension]

        norm = math.sqrt(sum(v * v for v in vector))
        if norm > 0:
            vector = [v / norm for v in vector]
        return vector
