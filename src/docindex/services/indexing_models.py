"""
Indexing Service data models.

Contains the result of a synchronization run and the indexing error type.
"""

from dataclasses import dataclass, field


@dataclass
class IndexingResult:
    """Result of a synchronization run.

    Attributes:
        total_files: Files discovered under the root
        processed: Files (re-)chunked, embedded and stored
        skipped: Unchanged files left as they were
        total_chunks: Chunks written during this run
        deleted_files: Files whose rows were removed because they disappeared
        failed_files: Relative paths of files that could not be indexed
        duration_seconds: Wall-clock duration of the run
    """

    total_files: int = 0
    processed: int = 0
    skipped: int = 0
    total_chunks: int = 0
    deleted_files: int = 0
    failed_files: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0


class IndexingError(Exception):
    """Raised when a file's embeddings do not line up with its chunks."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        expected: int | None = None,
        actual: int | None = None,
    ):
        self.file_path = file_path
        self.expected = expected
        self.actual = actual
        super().__init__(message)
