"""
Path validation utilities for docindex.

Provides validation of folders before indexing and the store directory
helpers used by the CLI.
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class PathValidationResult:
    """Result of path validation.

    Attributes:
        valid: True if the path is valid for the requested operation.
        error_message: Human-readable error message if validation failed.
    """
    valid: bool
    error_message: Optional[str] = None


# POSIX system directories that should not be indexed
POSIX_SYSTEM_DIRS = frozenset([
    "/etc",
    "/usr",
    "/bin",
    "/sbin",
    "/proc",
    "/sys",
    "/dev",
    "/boot",
    "/lib",
    "/lib64",
])

# Windows system directory names (case-insensitive)
WINDOWS_SYSTEM_DIRS = frozenset([
    "windows",
    "program files",
    "program files (x86)",
    "programdata",
])


def is_system_directory(path: Path) -> bool:
    """Check if a path is the filesystem root or lies under a system directory."""
    try:
        resolved = path.resolve()
    except (OSError, ValueError):
        return False

    if resolved == Path(resolved.anchor):
        return True
    if sys.platform == "win32":
        return any(part.lower() in WINDOWS_SYSTEM_DIRS for part in resolved.parts[1:2])

    path_str = str(resolved)
    for sys_dir in POSIX_SYSTEM_DIRS:
        if path_str == sys_dir or path_str.startswith(sys_dir + "/"):
            return True
    return False


def validate_indexable_path(path: str | Path) -> PathValidationResult:
    """
    Validate that a path is suitable for indexing.

    The path must exist, be a directory and not be a system directory.
    """
    p = Path(path)
    try:
        if not p.exists():
            return PathValidationResult(valid=False, error_message=f"Path '{path}' does not exist")
        if not p.is_dir():
            return PathValidationResult(
                valid=False, error_message=f"Path '{path}' is not a directory"
            )
    except OSError as e:
        return PathValidationResult(valid=False, error_message=f"Invalid path '{path}': {e}")

    if is_system_directory(p):
        return PathValidationResult(
            valid=False, error_message="Indexing system directories is forbidden"
        )
    return PathValidationResult(valid=True)


def resolve_store_dir(
    folder: Path | str,
    db_path: Optional[Path | str] = None,
    store_dir_name: str = ".docindex",
) -> Path:
    """
    Compute the index directory for a documentation folder.

    Args:
        folder: Documentation root
        db_path: Explicit store location; wins when given
        store_dir_name: Directory name used under folder when db_path is None

    Returns:
        Absolute path of the store directory
    """
    if db_path:
        return Path(db_path).expanduser().resolve()
    return Path(folder).expanduser().resolve() / store_dir_name
