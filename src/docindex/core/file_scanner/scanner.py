"""
DocumentScanner implementation for recursive directory scanning.
"""

import fnmatch
import logging
from pathlib import Path
from typing import Iterator

import pathspec

from .interfaces import FileScannerInterface
from .models import DEFAULT_EXTENSIONS, SENSITIVE_DENYLIST, DocumentFile

logger = logging.getLogger(__name__)


def _build_spec(patterns: list[str]) -> pathspec.PathSpec | None:
    """Compile gitignore-style patterns, or None when there are none."""
    if not patterns:
        return None
    return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, patterns)


def default_include_patterns() -> list[str]:
    """Return the include patterns used when none are configured."""
    return [f"**/*{ext}" for ext in DEFAULT_EXTENSIONS]


class DocumentScanner(FileScannerInterface):
    """
    Concrete implementation of FileScannerInterface.

    Provides recursive directory scanning with:
    - Include patterns that fully replace the default extension set
    - Exclude patterns applied after matching
    - Hidden entries, symlinks and the sensitive denylist always skipped
    - Library/topic identity derived from the relative path
    """

    def __init__(
        self,
        include_patterns: list[str] | None = None,
        exclude_patterns: list[str] | None = None,
    ):
        """
        Initialize the DocumentScanner.

        Args:
            include_patterns: Gitignore-style patterns selecting files. If None
                or empty, the default documentation extensions are used.
            exclude_patterns: Gitignore-style patterns removing files or whole
                directories from the result.
        """
        self._include_patterns: list[str] = []
        self._exclude_patterns: list[str] = []
        self._include_spec: pathspec.PathSpec | None = None
        self._exclude_spec: pathspec.PathSpec | None = None
        self.set_include_patterns(include_patterns or [])
        self.set_exclude_patterns(exclude_patterns or [])

    @property
    def include_patterns(self) -> list[str]:
        return list(self._include_patterns)

    @property
    def exclude_patterns(self) -> list[str]:
        return list(self._exclude_patterns)

    def set_include_patterns(self, patterns: list[str]) -> None:
        """Replace the include patterns; empty restores the defaults."""
        self._include_patterns = list(patterns) if patterns else default_include_patterns()
        self._include_spec = _build_spec(self._include_patterns)

    def set_exclude_patterns(self, patterns: list[str]) -> None:
        """Replace the exclude patterns."""
        self._exclude_patterns = list(patterns)
        self._exclude_spec = _build_spec(self._exclude_patterns)

    def add_exclude_pattern(self, pattern: str) -> None:
        """Append a single exclude pattern."""
        self.set_exclude_patterns(self._exclude_patterns + [pattern])

    def _matches_sensitive_denylist(self, name: str) -> bool:
        """
        Check if a file or directory name matches the sensitive denylist.

        This check cannot be overridden by user configuration.
        """
        for pattern in SENSITIVE_DENYLIST:
            if name == pattern or fnmatch.fnmatch(name, pattern):
                return True
        return False

    def _is_excluded(self, relative_path: str, is_dir: bool = False) -> bool:
        if self._exclude_spec is None:
            return False
        if is_dir:
            return self._exclude_spec.match_file(relative_path + "/")
        return self._exclude_spec.match_file(relative_path)

    def _is_included(self, relative_path: str) -> bool:
        return self._include_spec is not None and self._include_spec.match_file(relative_path)

    def scan(self, root_path: Path) -> list[DocumentFile]:
        """
        Recursively scan a directory and return matching DocumentFile objects.

        Args:
            root_path: Root directory to scan

        Returns:
            DocumentFile objects sorted by relative path
        """
        root_path = Path(root_path).resolve()

        if not root_path.exists():
            raise FileNotFoundError(f"Root path does not exist: {root_path}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Root path is not a directory: {root_path}")

        files = [
            DocumentFile.from_relative(str(path), path.relative_to(root_path).as_posix())
            for path in self._scan_directory(root_path, root_path)
        ]
        files.sort(key=lambda f: f.relative_path)
        logger.debug(f"Discovered {len(files)} files under {root_path}")
        return files

    def _scan_directory(self, root_path: Path, current_path: Path) -> Iterator[Path]:
        try:
            entries = sorted(current_path.iterdir(), key=lambda p: p.name)
        except PermissionError as e:
            logger.warning(f"Permission denied accessing directory: {current_path} - {e}")
            return
        except OSError as e:
            logger.warning(f"Error accessing directory: {current_path} - {e}")
            return

        for entry in entries:
            name = entry.name
            if name.startswith("."):
                continue
            if entry.is_symlink():
                logger.debug(f"Skipping symlink: {entry}")
                continue
            if self._matches_sensitive_denylist(name):
                logger.debug(f"Ignoring sensitive file/directory: {entry}")
                continue

            relative_path = entry.relative_to(root_path).as_posix()

            if entry.is_dir():
                if self._is_excluded(relative_path, is_dir=True):
                    logger.debug(f"Excluding directory: {relative_path}")
                    continue
                yield from self._scan_directory(root_path, entry)
            elif entry.is_file():
                if self._is_included(relative_path) and not self._is_excluded(relative_path):
                    yield entry
