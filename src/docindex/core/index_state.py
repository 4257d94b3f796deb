"""
Fingerprint models for incremental indexing.

IndexState maps absolute file paths to the FileState recorded after each
file's last successful indexing. It is only a cache: the vector store holds
the chunk content.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def utc_now_iso() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass
class FileState:
    """
    Fingerprint of one indexed file.

    Attributes:
        content_hash: SHA-256 hex digest of the full file bytes
        last_modified: ISO-8601 UTC modification time at fingerprinting
        chunk_count: Number of chunks stored for the file
        relative_path: Path the file's rows are stored under
    """

    content_hash: str
    last_modified: str
    chunk_count: int = 0
    relative_path: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileState":
        return cls(
            content_hash=str(data["content_hash"]),
            last_modified=str(data["last_modified"]),
            chunk_count=int(data.get("chunk_count", 0)),
            relative_path=data.get("relative_path"),
        )


@dataclass
class IndexState:
    """Fingerprints of every successfully indexed file, keyed by absolute path."""

    files: dict[str, FileState] = field(default_factory=dict)
    last_updated: Optional[str] = None

    def get(self, file_path: str) -> Optional[FileState]:
        return self.files.get(file_path)

    def set(self, file_path: str, state: FileState) -> None:
        self.files[file_path] = state

    def remove(self, file_path: str) -> None:
        self.files.pop(file_path, None)

    @property
    def total_chunks(self) -> int:
        return sum(state.chunk_count for state in self.files.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": {path: asdict(state) for path, state in sorted(self.files.items())},
            "last_updated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IndexState":
        files = {
            str(path): FileState.from_dict(entry)
            for path, entry in (data.get("files") or {}).items()
        }
        return cls(files=files, last_updated=data.get("last_updated"))
