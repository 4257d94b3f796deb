"""
DocumentChunker: turns extracted text into identified, ordered chunks.
"""

import logging

from docindex.core.file_scanner import DocumentFile

from .interfaces import ChunkerConfig, ChunkerInterface
from .models import DocumentChunk
from .splitter import split_text

logger = logging.getLogger(__name__)


class DocumentChunker(ChunkerInterface):
    """Chunker backed by split_text."""

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
        if chunk_overlap < 0:
            raise ValueError(f"chunk_overlap must not be negative, got {chunk_overlap}")
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap

    def chunk(self, file: DocumentFile, text: str) -> list[DocumentChunk]:
        pieces = split_text(text, self._chunk_size, self._chunk_overlap)
        chunks = [
            DocumentChunk(
                chunk_id=f"{file.relative_path}::{order}",
                library_id=file.library_id,
                topic_name=file.topic_name,
                original_file_path=file.relative_path,
                text=piece,
                order=order,
            )
            for order, piece in enumerate(pieces)
        ]
        logger.debug(f"Chunked {file.relative_path} into {len(chunks)} chunks")
        return chunks

    def get_config(self) -> ChunkerConfig:
        return ChunkerConfig(chunk_size=self._chunk_size, chunk_overlap=self._chunk_overlap)


def create_chunker(chunk_size: int = 1000, chunk_overlap: int = 200) -> DocumentChunker:
    """
    Factory function to create a configured DocumentChunker.

    Args:
        chunk_size: Target maximum chunk length in characters
        chunk_overlap: Characters of the previous chunk prefixed to the next

    Returns:
        Configured DocumentChunker instance
    """
    return DocumentChunker(chunk_size=chunk_size, chunk_overlap=chunk_overlap)
