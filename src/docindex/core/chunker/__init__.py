"""
Chunker module for docindex.

Splits extracted documentation text into paragraph and sentence aware chunks
with optional character overlap.
"""

from .chunker import DocumentChunker, create_chunker
from .interfaces import ChunkerConfig, ChunkerInterface
from .models import METADATA_KEYS, DocumentChunk, EmbeddedChunk
from .splitter import split_text

__all__ = [
    # Main classes
    "DocumentChunker",
    "ChunkerInterface",
    "ChunkerConfig",
    "DocumentChunk",
    "EmbeddedChunk",
    "METADATA_KEYS",
    # Functions
    "split_text",
    "create_chunker",
]
