"""
Vector Store base types and interfaces.

Contains the abstract interface, the row schema, query types and exceptions
shared by every vector store implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from docindex.core.chunker import EmbeddedChunk


class VectorStoreError(Exception):
    """Base exception for vector store errors."""

    pass


class DimensionMismatchError(VectorStoreError):
    """A vector's width differs from the collection's vector size."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Vector dimension mismatch: store expects {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class ChunkRecord(BaseModel):
    """
    One stored row: a chunk, its vector and its optional enrichment fields.

    The field set is fixed; unknown fields are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    id: str
    library_id: str
    topic_name: Optional[str] = None
    original_file_path: str
    text: str
    order: int = Field(ge=0)
    vector: list[float]
    difficulty: Optional[str] = None
    use_cases: list[str] = Field(default_factory=list)
    code_patterns: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    @classmethod
    def from_embedded_chunk(cls, embedded: EmbeddedChunk) -> "ChunkRecord":
        chunk = embedded.chunk
        metadata = chunk.metadata or {}
        return cls(
            id=chunk.chunk_id,
            library_id=chunk.library_id,
            topic_name=chunk.topic_name,
            original_file_path=chunk.original_file_path,
            text=chunk.text,
            order=chunk.order,
            vector=embedded.vector,
            difficulty=metadata.get("difficulty"),
            use_cases=list(metadata.get("use_cases") or []),
            code_patterns=list(metadata.get("code_patterns") or []),
            tags=list(metadata.get("tags") or []),
        )

    def to_payload(self) -> dict[str, Any]:
        """Every field except the vector."""
        return self.model_dump(exclude={"vector"})

    @classmethod
    def from_payload(cls, payload: dict[str, Any], vector: list[float]) -> "ChunkRecord":
        return cls.model_validate({**payload, "vector": vector})


@dataclass(frozen=True)
class SearchFilters:
    """
    Equality filters applied conjunctively to a search.

    A field left as None places no constraint.
    """

    library_id: Optional[str] = None
    difficulty: Optional[str] = None
    topic_name: Optional[str] = None

    def as_dict(self) -> dict[str, str]:
        """The constrained fields and their required values."""
        pairs = {
            "library_id": self.library_id,
            "difficulty": self.difficulty,
            "topic_name": self.topic_name,
        }
        return {key: value for key, value in pairs.items() if value is not None}

    def matches(self, payload: dict[str, Any]) -> bool:
        return all(payload.get(key) == value for key, value in self.as_dict().items())


@dataclass
class SearchResult:
    """
    A stored chunk returned by a nearest-neighbour query.

    ``distance`` is the cosine distance to the query vector; smaller is closer.
    """

    chunk_id: str
    library_id: str
    original_file_path: str
    text: str
    order: int
    distance: float
    topic_name: Optional[str] = None
    metadata: dict = field(default_factory=dict)

    @property
    def relevance(self) -> float:
        """Display score, ``1 - distance``. Not clamped to [0, 1]."""
        return 1.0 - self.distance

    @classmethod
    def from_payload(cls, payload: dict[str, Any], distance: float) -> "SearchResult":
        return cls(
            chunk_id=payload.get("id", ""),
            library_id=payload.get("library_id", ""),
            topic_name=payload.get("topic_name"),
            original_file_path=payload.get("original_file_path", ""),
            text=payload.get("text", ""),
            order=payload.get("order", 0),
            distance=distance,
            metadata={
                "difficulty": payload.get("difficulty"),
                "use_cases": payload.get("use_cases") or [],
                "code_patterns": payload.get("code_patterns") or [],
                "tags": payload.get("tags") or [],
            },
        )


class VectorStoreInterface(ABC):
    """Abstract interface for vector stores."""

    @abstractmethod
    async def initialize(self) -> None:
        """Open the store and create the collection if it does not exist."""
        pass

    @abstractmethod
    async def insert(self, records: list[ChunkRecord]) -> None:
        """
        Add rows to the store.

        Raises:
            DimensionMismatchError: If any vector has the wrong width
            VectorStoreError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_by_file(self, relative_path: str) -> int:
        """Delete every row whose original_file_path equals relative_path.

        Returns:
            Number of rows deleted
        """
        pass

    @abstractmethod
    async def search(
        self,
        query_vector: list[float],
        limit: int = 10,
        filters: Optional[SearchFilters] = None,
    ) -> list[SearchResult]:
        """
        Find the rows nearest to query_vector.

        Returns:
            At most ``limit`` results ordered by distance ascending

        Raises:
            DimensionMismatchError: If query_vector has the wrong width
        """
        pass

    @abstractmethod
    async def get_stats(self) -> dict:
        """
        Get storage statistics.

        Returns:
            Dictionary with total_chunks, libraries, topics, files,
            collection_name and vector_size
        """
        pass

    @abstractmethod
    async def drop(self) -> None:
        """Delete the whole collection. The next write recreates it."""
        pass

    async def close(self) -> None:
        """Release the connection or file lock held by the store."""
        pass
