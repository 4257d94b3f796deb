"""Shared helpers for indexing and search tests."""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from docindex.core.change_tracker import ChangeTracker
from docindex.core.chunker import create_chunker
from docindex.infrastructure.embedding import EmbeddingClientInterface
from docindex.infrastructure.fakes import InMemoryVectorStore, LocalEmbeddingClient
from docindex.infrastructure.index_state import STATE_FILE_NAME, IndexStateStore
from docindex.infrastructure.text_extractor import TextExtractorInterface
from docindex.services.indexing_service import IndexingService
from docindex.services.search_service import SearchService

DIMENSION = 16


def run_async(coro):
    """Run an async coroutine synchronously."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def write_file(root: Path, relative_path: str, content: str) -> Path:
    """Create a file (and its parents) below root."""
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@dataclass
class IndexEnv:
    """A documentation root wired to in-memory collaborators."""

    root: Path
    store_dir: Path
    embedding_client: EmbeddingClientInterface
    vector_store: InMemoryVectorStore
    state_store: IndexStateStore
    indexing_service: IndexingService
    search_service: SearchService

    def sync(self, force: bool = False):
        return run_async(self.indexing_service.synchronize(self.root, force=force))


def create_index_env(
    tmp_path: Path,
    embedding_client: Optional[EmbeddingClientInterface] = None,
    text_extractor: Optional[TextExtractorInterface] = None,
    change_tracker: Optional[ChangeTracker] = None,
    chunk_size: int = 200,
    chunk_overlap: int = 20,
    extraction_timeout: float = 30.0,
) -> IndexEnv:
    root = tmp_path / "docs"
    root.mkdir(parents=True, exist_ok=True)
    store_dir = tmp_path / "store"

    embedding_client = embedding_client or LocalEmbeddingClient(dimension=DIMENSION)
    vector_store = InMemoryVectorStore(vector_size=DIMENSION)
    state_store = IndexStateStore(store_dir / STATE_FILE_NAME)

    indexing_service = IndexingService(
        embedding_client=embedding_client,
        vector_store=vector_store,
        state_store=state_store,
        chunker=create_chunker(chunk_size=chunk_size, chunk_overlap=chunk_overlap),
        text_extractor=text_extractor,
        change_tracker=change_tracker,
        extraction_timeout=extraction_timeout,
    )
    search_service = SearchService(
        embedding_client=embedding_client,
        vector_store=vector_store,
        state_store=state_store,
    )
    return IndexEnv(
        root=root,
        store_dir=store_dir,
        embedding_client=embedding_client,
        vector_store=vector_store,
        state_store=state_store,
        indexing_service=indexing_service,
        search_service=search_service,
    )
