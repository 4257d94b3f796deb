"""
Core Layer - File discovery, change tracking, chunking and configuration.
"""

from docindex.core.change_tracker import ChangeTracker, hash_file
from docindex.core.chunker import (
    ChunkerConfig,
    ChunkerInterface,
    DocumentChunk,
    DocumentChunker,
    EmbeddedChunk,
    create_chunker,
    split_text,
)
from docindex.core.config import (
    ConfigurationError,
    DocIndexConfig,
    EmbeddingConfig,
    IndexingConfig,
    LoggingConfig,
    SearchConfig,
    VectorStoreConfig,
    load_config,
)
from docindex.core.file_scanner import (
    DEFAULT_EXTENSIONS,
    DocumentFile,
    DocumentScanner,
    FileScannerInterface,
)
from docindex.core.index_state import FileState, IndexState

__all__ = [
    # Chunker
    "ChunkerConfig",
    "ChunkerInterface",
    "DocumentChunk",
    "DocumentChunker",
    "EmbeddedChunk",
    "create_chunker",
    "split_text",
    # Change tracking
    "ChangeTracker",
    "FileState",
    "IndexState",
    "hash_file",
    # Config
    "ConfigurationError",
    "DocIndexConfig",
    "EmbeddingConfig",
    "IndexingConfig",
    "LoggingConfig",
    "SearchConfig",
    "VectorStoreConfig",
    "load_config",
    # File discovery
    "DEFAULT_EXTENSIONS",
    "DocumentFile",
    "DocumentScanner",
    "FileScannerInterface",
]
