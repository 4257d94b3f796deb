"""
JSON persistence of the index fingerprints.

The state file is written atomically: a temporary file in the same directory
is renamed over the old one, so a crash never leaves it half written.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from docindex.core.index_state import IndexState, utc_now_iso

logger = logging.getLogger(__name__)

STATE_FILE_NAME = "index_state.json"


class IndexStateError(Exception):
    """The state file could not be read, parsed or written."""

    pass


class IndexStateStore:
    """Loads and saves the IndexState of one store directory."""

    def __init__(self, path: Path | str):
        """
        Args:
            path: Location of the JSON state file
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> IndexState:
        """
        Read the state file.

        Returns:
            The stored IndexState, or an empty one when the file is absent

        Raises:
            IndexStateError: If the file exists but cannot be read or parsed
        """
        if not self._path.exists():
            logger.debug(f"No index state at {self._path}, starting empty")
            return IndexState()

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            state = IndexState.from_dict(data)
        except OSError as e:
            raise IndexStateError(f"Failed to read index state {self._path}: {e}") from e
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise IndexStateError(f"Corrupt index state {self._path}: {e}") from e

        logger.debug(f"Loaded index state with {len(state.files)} files")
        return state

    def save(self, state: IndexState) -> None:
        """
        Persist the state, stamping ``last_updated``.

        Raises:
            IndexStateError: If the file cannot be written
        """
        state.last_updated = utc_now_iso()
        content = json.dumps(state.to_dict(), indent=2, ensure_ascii=False)
        directory = self._path.parent

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".state_", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                os.replace(tmp_path, self._path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise IndexStateError(f"Failed to write index state {self._path}: {e}") from e

        logger.debug(f"Saved index state with {len(state.files)} files to {self._path}")

    def clear(self) -> None:
        """Delete the state file if present."""
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise IndexStateError(f"Failed to delete index state {self._path}: {e}") from e
