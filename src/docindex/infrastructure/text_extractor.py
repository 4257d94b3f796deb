"""
Plain-text extraction from documentation files.

PDFs are read with pypdf; every other file is decoded as UTF-8.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from pypdf import PdfReader

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """A file's text could not be extracted."""

    pass


class TextExtractorInterface(ABC):
    """Abstract interface for turning a file into plain text."""

    @abstractmethod
    def extract(self, path: Path | str) -> str:
        """
        Extract the plain text of a file.

        Raises:
            ExtractionError: If the file cannot be read or decoded
        """
        pass


class DocumentTextExtractor(TextExtractorInterface):
    """Extracts text from UTF-8 documents and PDFs."""

    def __init__(self, max_file_size_mb: int = 50):
        self._max_bytes = max_file_size_mb * 1024 * 1024

    def extract(self, path: Path | str) -> str:
        path = Path(path)
        try:
            size = path.stat().st_size
        except OSError as e:
            raise ExtractionError(f"Cannot stat {path}: {e}") from e
        if size > self._max_bytes:
            raise ExtractionError(
                f"{path} is {size} bytes, above the {self._max_bytes} byte limit"
            )

        if path.suffix.lower() == ".pdf":
            return self._extract_pdf(path)

        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ExtractionError(f"Failed to decode file as UTF-8: {path} - {e}") from e
        except OSError as e:
            raise ExtractionError(f"Failed to read {path}: {e}") from e

    def _extract_pdf(self, path: Path) -> str:
        try:
            reader = PdfReader(path)
            pages = [page.extract_text() or "" for page in reader.pages]
        except Exception as e:
            # pypdf errors are not one hierarchy: DependencyError, KeyError, TypeError
            raise ExtractionError(f"Failed to read PDF {path}: {e}") from e

        logger.debug(f"Extracted {len(pages)} pages from {path}")
        # A blank line between pages keeps them in separate paragraphs
        return "\n\n".join(page for page in pages if page.strip())
