"""
Change detection for incremental indexing.

A file is re-indexed only when its fingerprint (content hash and, optionally,
modification time) differs from the one recorded after its last successful
indexing.
"""

import hashlib
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .index_state import FileState

logger = logging.getLogger(__name__)

_HASH_BLOCK_SIZE = 64 * 1024


def hash_file(path: Path | str) -> str:
    """Return the SHA-256 hex digest of a file's full contents."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for block in iter(lambda: f.read(_HASH_BLOCK_SIZE), b""):
            digest.update(block)
    return digest.hexdigest()


def mtime_iso(path: Path | str) -> str:
    """Return a file's modification time as an ISO-8601 UTC string."""
    mtime = Path(path).stat().st_mtime
    return datetime.fromtimestamp(mtime, tz=timezone.utc).isoformat()


class ChangeTracker:
    """Decides whether a file needs re-indexing against its recorded FileState."""

    def __init__(self, detect_mtime_changes: bool = True):
        """
        Args:
            detect_mtime_changes: Treat a changed modification time as a change
                even when the content hash is identical.
        """
        self._detect_mtime_changes = detect_mtime_changes

    def fingerprint(self, path: Path | str) -> FileState:
        """Compute the current fingerprint of a file (chunk_count left at 0)."""
        return FileState(content_hash=hash_file(path), last_modified=mtime_iso(path))

    def has_changed(self, path: Path | str, previous: Optional[FileState]) -> bool:
        """
        Check whether a file differs from its recorded state.

        Args:
            path: File to check
            previous: FileState recorded at the last successful indexing, if any

        Returns:
            True if there is no previous state, or the mtime or content differs
        """
        if previous is None:
            return True

        if self._detect_mtime_changes and mtime_iso(path) != previous.last_modified:
            logger.debug(f"Modification time changed: {path}")
            return True

        if hash_file(path) != previous.content_hash:
            logger.debug(f"Content hash changed: {path}")
            return True

        return False
