"""
Abstract interfaces for file discovery.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from .models import DocumentFile


class FileScannerInterface(ABC):
    """
    Abstract interface for documentation file discovery.

    Implementations enumerate candidate files under a root directory using
    include and exclude patterns.
    """

    @abstractmethod
    def scan(self, root_path: Path) -> list[DocumentFile]:
        """
        Discover documentation files below a root directory.

        Args:
            root_path: Root directory to scan

        Returns:
            DocumentFile objects ordered by relative path

        Raises:
            FileNotFoundError: If root_path does not exist
            NotADirectoryError: If root_path is not a directory
        """
        pass

    @abstractmethod
    def set_include_patterns(self, patterns: list[str]) -> None:
        """
        Replace the include patterns (gitignore wildmatch syntax).

        An empty list restores the default extension set.
        """
        pass

    @abstractmethod
    def set_exclude_patterns(self, patterns: list[str]) -> None:
        """Replace the exclude patterns (gitignore wildmatch syntax)."""
        pass
