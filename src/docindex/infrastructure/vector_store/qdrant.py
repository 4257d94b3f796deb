"""
Qdrant-based vector store implementation.

Runs against a Qdrant server (``url``) or the embedded on-disk engine
(``path``). The embedded engine locks its directory, so only one process can
write a given store at a time.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional

from qdrant_client import AsyncQdrantClient, models

from .base import (
    ChunkRecord,
    DimensionMismatchError,
    SearchFilters,
    SearchResult,
    VectorStoreError,
    VectorStoreInterface,
)

logger = logging.getLogger(__name__)

# Payload fields that carry a keyword index on a Qdrant server
_INDEXED_FIELDS = ("original_file_path", "library_id", "topic_name", "difficulty")

_SCROLL_PAGE = 1000


def point_id(chunk_id: str) -> str:
    """Deterministic Qdrant point id for a chunk id."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, chunk_id))


def _equality_filter(conditions: dict[str, str]) -> Optional[models.Filter]:
    if not conditions:
        return None
    return models.Filter(
        must=[
            models.FieldCondition(key=key, match=models.MatchValue(value=value))
            for key, value in conditions.items()
        ]
    )


class QdrantVectorStore(VectorStoreInterface):
    """
    Qdrant-based vector store implementation.

    Chunks are stored as points with cosine distance; the payload holds the
    ChunkRecord fields and every filter is a parameterized FieldCondition.
    """

    def __init__(
        self,
        collection_name: str = "chunks",
        vector_size: int = 384,
        path: Optional[Path | str] = None,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
    ):
        if not path and not url:
            raise ValueError("QdrantVectorStore needs either a path or a url")
        self._collection_name = collection_name
        self._vector_size = vector_size
        self._path = Path(path) if path and not url else None
        self._url = url or None
        self._api_key = api_key or None
        self._client: Optional[AsyncQdrantClient] = None
        self._initialized = False

    @property
    def is_local(self) -> bool:
        return self._path is not None

    @property
    def vector_size(self) -> int:
        return self._vector_size

    def _get_client(self) -> AsyncQdrantClient:
        """Get or create the Qdrant client."""
        if self._client is None:
            if self._path is not None:
                self._path.mkdir(parents=True, exist_ok=True)
                self._client = AsyncQdrantClient(path=str(self._path))
            else:
                self._client = AsyncQdrantClient(url=self._url, api_key=self._api_key)
        return self._client

    async def initialize(self) -> None:
        """Create the collection if it doesn't exist, else check its vector size."""
        if self._initialized:
            return

        try:
            client = self._get_client()
            if not await client.collection_exists(self._collection_name):
                await client.create_collection(
                    collection_name=self._collection_name,
                    vectors_config=models.VectorParams(
                        size=self._vector_size,
                        distance=models.Distance.COSINE,
                    ),
                )
                logger.info(f"Created collection: {self._collection_name}")

                if not self.is_local:
                    for field_name in _INDEXED_FIELDS:
                        await client.create_payload_index(
                            collection_name=self._collection_name,
                            field_name=field_name,
                            field_schema=models.PayloadSchemaType.KEYWORD,
                        )
            else:
                info = await client.get_collection(self._collection_name)
                params = info.config.params if info.config else None
                existing_size = (
                    params.vectors.size
                    if params and isinstance(params.vectors, models.VectorParams)
                    else None
                )
                if existing_size and existing_size != self._vector_size:
                    raise VectorStoreError(
                        f"Existing collection '{self._collection_name}' has vector size "
                        f"{existing_size}, but {self._vector_size} was requested. "
                        f"Rebuild the index with --force."
                    )

            self._initialized = True

        except VectorStoreError:
            raise
        except Exception as e:
            raise VectorStoreError(f"Failed to initialize collection: {e}") from e

    def _check_dimension(self, vector: list[float]) -> None:
        if len(vector) != self._vector_size:
            raise DimensionMismatchError(self._vector_size, len(vector))

    async def insert(self, records: list[ChunkRecord]) -> None:
        if not records:
            return
        for record in records:
            self._check_dimension(record.vector)

        await self.initialize()
        points = [
            models.PointStruct(
                id=point_id(record.id),
                vector=record.vector,
                payload=record.to_payload(),
            )
            for record in records
        ]
        try:
            await self._get_client().upsert(
                collection_name=self._collection_name, points=points, wait=True
            )
        except Exception as e:
            raise VectorStoreError(f"Failed to insert {len(points)} rows: {e}") from e

    async def delete_by_file(self, relative_path: str) -> int:
        """Delete all rows for a file, return count deleted."""
        await self.initialize()
        client = self._get_client()
        file_filter = _equality_filter({"original_file_path": relative_path})

        try:
            count = (
                await client.count(
                    collection_name=self._collection_name,
                    count_filter=file_filter,
                    exact=True,
                )
            ).count
            if count > 0:
                await client.delete(
                    collection_name=self._collection_name,
                    points_selector=models.FilterSelector(filter=file_filter),
                    wait=True,
                )
            return count
        except Exception as e:
            raise VectorStoreError(
                f"Failed to delete rows for file '{relative_path}': {e}"
            ) from e

    async def search(
        self,
        query_vector: list[float],
        limit: int = 10,
        filters: Optional[SearchFilters] = None,
    ) -> list[SearchResult]:
        self._check_dimension(query_vector)
        await self.initialize()

        query_filter = _equality_filter(filters.as_dict() if filters else {})
        try:
            response = await self._get_client().query_points(
                collection_name=self._collection_name,
                query=query_vector,
                limit=limit,
                query_filter=query_filter,
                with_payload=True,
            )
        except Exception as e:
            raise VectorStoreError(f"Failed to search vectors: {e}") from e

        # Qdrant reports cosine similarity; convert to distance
        results = [
            SearchResult.from_payload(point.payload or {}, distance=1.0 - point.score)
            for point in response.points
        ]
        results.sort(key=lambda r: r.distance)
        return results

    async def get_stats(self) -> dict:
        """Get storage statistics."""
        await self.initialize()
        client = self._get_client()

        try:
            total = (await client.count(collection_name=self._collection_name, exact=True)).count

            libraries: set[str] = set()
            topics: set[str] = set()
            files: set[str] = set()
            offset = None
            while True:
                records, offset = await client.scroll(
                    collection_name=self._collection_name,
                    limit=_SCROLL_PAGE,
                    offset=offset,
                    with_payload=["library_id", "topic_name", "original_file_path"],
                    with_vectors=False,
                )
                for record in records:
                    payload = record.payload or {}
                    if payload.get("library_id"):
                        libraries.add(payload["library_id"])
                    if payload.get("topic_name"):
                        topics.add(payload["topic_name"])
                    if payload.get("original_file_path"):
                        files.add(payload["original_file_path"])
                if offset is None:
                    break
        except Exception as e:
            raise VectorStoreError(f"Failed to get stats: {e}") from e

        return {
            "total_chunks": total,
            "libraries": sorted(libraries),
            "topics": sorted(topics),
            "files": len(files),
            "collection_name": self._collection_name,
            "vector_size": self._vector_size,
        }

    async def drop(self) -> None:
        """Delete the collection; the next write recreates it."""
        client = self._get_client()
        try:
            if await client.collection_exists(self._collection_name):
                await client.delete_collection(self._collection_name)
                logger.info(f"Dropped collection: {self._collection_name}")
        except Exception as e:
            raise VectorStoreError(
                f"Failed to drop collection '{self._collection_name}': {e}"
            ) from e
        self._initialized = False

    async def close(self) -> None:
        """Close the client connection."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._initialized = False
