"""Abstract interface for embedding clients."""

from abc import ABC, abstractmethod


class EmbeddingClientInterface(ABC):
    """
    Maps text to fixed-length vectors.

    The same client must be used for indexing and querying a store so that
    vectors share one space and one dimension.
    """

    @abstractmethod
    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Generate embeddings for a batch of texts.

        Args:
            texts: List of text strings to embed

        Returns:
            List of embedding vectors, one per input text, in input order
        """
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the embedding vector dimension."""
        pass

    async def embed(self, text: str) -> list[float]:
        """Generate the embedding of a single text."""
        vectors = await self.embed_batch([text])
        return vectors[0]

    async def initialize(self) -> None:
        """Load models or open connections ahead of the first call."""
        return None

    async def close(self) -> None:
        """Release resources held by the client."""
        return None
