"""
File discovery module for docindex.

Provides recursive directory scanning with include/exclude pattern support
and library/topic identity derived from path structure.
"""

from .interfaces import FileScannerInterface
from .models import DEFAULT_EXTENSIONS, SENSITIVE_DENYLIST, DocumentFile
from .scanner import DocumentScanner, default_include_patterns

__all__ = [
    # Main classes
    "DocumentScanner",
    "FileScannerInterface",
    "DocumentFile",
    "default_include_patterns",
    # Constants
    "DEFAULT_EXTENSIONS",
    "SENSITIVE_DENYLIST",
]
