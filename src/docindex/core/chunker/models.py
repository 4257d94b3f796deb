"""
Data models for the chunker module.

Contains DocumentChunk and EmbeddedChunk dataclasses.
"""

from dataclasses import dataclass, field
from typing import Optional

# Optional enrichment keys carried on every chunk. The chunker never fills them.
METADATA_KEYS: tuple[str, ...] = ("difficulty", "use_cases", "code_patterns", "tags")


@dataclass
class DocumentChunk:
    """
    Represents a chunk of documentation text for indexing.

    Attributes:
        chunk_id: Identifier of the form "<relative_path>::<order>"
        library_id: First segment of the source file's relative path
        topic_name: Second segment, when the file is nested deeply enough
        original_file_path: Relative path of the source file
        text: The chunk content, including any overlap prefix
        order: Zero-based position of the chunk within its file
        metadata: Optional difficulty, use_cases, code_patterns and tags
    """

    chunk_id: str
    library_id: str
    original_file_path: str
    text: str
    order: int
    topic_name: Optional[str] = None
    metadata: dict = field(default_factory=dict)


@dataclass
class EmbeddedChunk:
    """A DocumentChunk paired with its embedding vector."""

    chunk: DocumentChunk
    vector: list[float]

    @property
    def chunk_id(self) -> str:
        return self.chunk.chunk_id
