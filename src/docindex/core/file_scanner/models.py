"""
Data models and constants for the file scanner module.
"""

from dataclasses import dataclass
from typing import Optional

# Extensions indexed when no include patterns are configured
DEFAULT_EXTENSIONS: tuple[str, ...] = (
    ".md",
    ".mdx",
    ".txt",
    ".rst",
    ".pdf",
    ".json",
    ".yaml",
    ".yml",
    ".xml",
    ".csv",
)

# Sensitive patterns that are ALWAYS excluded regardless of user config
# These patterns protect credentials, keys, and private data from being indexed
SENSITIVE_DENYLIST: frozenset[str] = frozenset([
    # SSH and GPG directories
    ".ssh",
    ".gnupg",
    # SSH key files
    "id_rsa",
    "id_rsa.pub",
    "id_ed25519",
    "id_ed25519.pub",
    "id_ecdsa",
    "id_ecdsa.pub",
    "id_dsa",
    "id_dsa.pub",
    # Certificates and keys (glob patterns)
    "*.pem",
    "*.key",
    "*.p12",
    "*.pfx",
    "*.crt",
    "*.keystore",
    # Environment files
    ".env",
    ".env.*",
    # Other sensitive files
    ".netrc",
    ".npmrc",
    ".pypirc",
])


@dataclass(frozen=True)
class DocumentFile:
    """
    A discovered documentation file.

    Attributes:
        file_path: Absolute path to the file
        relative_path: Path relative to the indexing root, with '/' separators
        library_id: First segment of the relative path
        topic_name: Second segment, only for files at least two directories deep
    """

    file_path: str
    relative_path: str
    library_id: str
    topic_name: Optional[str] = None

    @classmethod
    def from_relative(cls, file_path: str, relative_path: str) -> "DocumentFile":
        """Derive library and topic identity from the relative path."""
        parts = relative_path.split("/")
        topic_name = parts[1] if len(parts) > 2 else None
        return cls(
            file_path=file_path,
            relative_path=relative_path,
            library_id=parts[0],
            topic_name=topic_name,
        )
