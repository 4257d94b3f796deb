"""
Centralized services container module for docindex.

Builds every collaborator of the indexing and search services from a
configuration and a store directory, so the CLI only deals with commands.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from docindex.core.change_tracker import ChangeTracker
from docindex.core.chunker import DocumentChunker, create_chunker
from docindex.core.config import DocIndexConfig
from docindex.core.file_scanner import DocumentScanner
from docindex.core.path_utils import resolve_store_dir as _resolve_store_dir
from docindex.infrastructure import (
    DocumentTextExtractor,
    EmbeddingClientInterface,
    IndexStateStore,
    VectorStoreInterface,
    create_embedding_client,
    create_vector_store,
)
from docindex.infrastructure.index_state import STATE_FILE_NAME
from docindex.services.indexing_service import IndexingService
from docindex.services.search_service import SearchService

logger = logging.getLogger(__name__)

VECTORS_DIR_NAME = "vectors"


@dataclass
class ServicesContainer:
    """
    Container holding all service collaborators for one store directory.

    Attributes:
        config: Application configuration
        store_dir: Directory holding the vectors and the fingerprint file
        embedding_client: Client for generating embeddings
        vector_store: Vector database for similarity search
        state_store: JSON store of per-file fingerprints
        file_scanner: Scanner for discovering documentation files
        chunker: Paragraph/sentence chunker
        text_extractor: Text and PDF extractor
        change_tracker: Fingerprint comparison
    """

    config: DocIndexConfig
    store_dir: Path
    embedding_client: EmbeddingClientInterface
    vector_store: VectorStoreInterface
    state_store: IndexStateStore
    file_scanner: DocumentScanner
    chunker: DocumentChunker
    text_extractor: DocumentTextExtractor
    change_tracker: ChangeTracker

    def indexing_service(
        self, progress_callback: Optional[Callable[[int, int, str], None]] = None
    ) -> IndexingService:
        return IndexingService(
            embedding_client=self.embedding_client,
            vector_store=self.vector_store,
            state_store=self.state_store,
            file_scanner=self.file_scanner,
            chunker=self.chunker,
            text_extractor=self.text_extractor,
            change_tracker=self.change_tracker,
            extraction_timeout=self.config.indexing.extraction_timeout,
            progress_callback=progress_callback,
        )

    def search_service(self) -> SearchService:
        return SearchService(
            embedding_client=self.embedding_client,
            vector_store=self.vector_store,
            state_store=self.state_store,
            default_limit=self.config.search.default_limit,
        )

    async def close(self) -> None:
        """Release the vector store lock and embedding connections."""
        await self.vector_store.close()
        await self.embedding_client.close()


def resolve_store_dir(
    folder: Path | str,
    db_path: Optional[Path | str] = None,
    config: Optional[DocIndexConfig] = None,
) -> Path:
    """Store directory for a folder: db_path when given, else <folder>/<store_dir_name>."""
    store_dir_name = (config or DocIndexConfig()).indexing.store_dir_name
    return _resolve_store_dir(folder, db_path, store_dir_name)


def create_services(
    config: DocIndexConfig,
    store_dir: Path,
    root_path: Optional[Path] = None,
) -> ServicesContainer:
    """
    Create all services for one store directory.

    Args:
        config: Validated application configuration
        store_dir: Directory holding the vectors and the fingerprint file
        root_path: Documentation root; when the store directory lies inside it
            under a visible name, it is excluded from discovery

    Returns:
        ServicesContainer with all services.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    config.validate()
    store_dir = Path(store_dir).resolve()

    embedding_client = create_embedding_client(config.embedding)

    vector_store = create_vector_store(
        collection_name=config.vector_store.collection_name,
        vector_size=config.embedding.dimension,
        path=store_dir / VECTORS_DIR_NAME,
        url=config.vector_store.url or None,
        api_key=config.vector_store.api_key or None,
    )

    file_scanner = DocumentScanner(
        include_patterns=config.indexing.include_patterns,
        exclude_patterns=config.indexing.exclude_patterns,
    )
    if root_path is not None:
        try:
            relative = store_dir.relative_to(Path(root_path).resolve())
        except ValueError:
            relative = None
        if relative is not None and relative.parts:
            file_scanner.add_exclude_pattern(f"/{relative.as_posix()}/")
            logger.debug(f"Excluding store directory from discovery: {relative}")

    return ServicesContainer(
        config=config,
        store_dir=store_dir,
        embedding_client=embedding_client,
        vector_store=vector_store,
        state_store=IndexStateStore(store_dir / STATE_FILE_NAME),
        file_scanner=file_scanner,
        chunker=create_chunker(
            chunk_size=config.indexing.chunk_size,
            chunk_overlap=config.indexing.chunk_overlap,
        ),
        text_extractor=DocumentTextExtractor(max_file_size_mb=config.indexing.max_file_size_mb),
        change_tracker=ChangeTracker(
            detect_mtime_changes=config.indexing.detect_mtime_changes
        ),
    )


def remove_index(store_dir: Path | str) -> bool:
    """
    Delete a store directory created by docindex.

    Only directories that hold a fingerprint file or a vectors directory are
    removed.

    Returns:
        True if something was removed, False if there was no index
    """
    store_dir = Path(store_dir)
    if not store_dir.is_dir():
        return False
    if not (store_dir / STATE_FILE_NAME).exists() and not (store_dir / VECTORS_DIR_NAME).exists():
        logger.warning(f"{store_dir} does not look like a docindex store, leaving it alone")
        return False
    shutil.rmtree(store_dir)
    logger.info(f"Removed index at {store_dir}")
    return True
