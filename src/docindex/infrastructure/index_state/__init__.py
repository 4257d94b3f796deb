"""
Index state persistence for docindex.

Stores per-file fingerprints in a JSON file inside the store directory.
"""

from .store import STATE_FILE_NAME, IndexStateError, IndexStateStore

__all__ = [
    "IndexStateStore",
    "IndexStateError",
    "STATE_FILE_NAME",
]
