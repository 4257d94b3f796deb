"""
Abstract interfaces for the chunker module.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from docindex.core.file_scanner import DocumentFile

from .models import DocumentChunk


@dataclass
class ChunkerConfig:
    """Size settings for chunker instances."""

    chunk_size: int = 1000
    chunk_overlap: int = 200


class ChunkerInterface(ABC):
    """Abstract interface for documentation chunking operations."""

    @abstractmethod
    def chunk(self, file: DocumentFile, text: str) -> list[DocumentChunk]:
        """
        Split a file's extracted text into ordered chunks.

        Args:
            file: The discovered file the text came from
            text: Plain text extracted from the file

        Returns:
            Chunks in document order; empty when the text has no content
        """
        pass

    @abstractmethod
    def get_config(self) -> ChunkerConfig:
        """
        Get the chunker configuration.

        Returns:
            ChunkerConfig with current settings
        """
        pass
