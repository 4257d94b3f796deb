"""Degraded embedding path that substitutes zero vectors on failure."""

import logging

from .errors import EmbeddingClientError, NonRetryableError
from .interface import EmbeddingClientInterface

logger = logging.getLogger(__name__)


class ZeroVectorFallbackClient(EmbeddingClientInterface):
    """
    Wraps another client and returns all-zero vectors when it fails.

    Only transient or internal failures are masked. A NonRetryableError (wrong
    vector width, unknown model, rejected credentials) always propagates.

    Zero vectors keep a file indexed (and searchable through filters) when the
    model cannot embed it, at the cost of meaningless similarity scores for
    those chunks. Every substitution is logged at WARNING.
    """

    def __init__(self, inner: EmbeddingClientInterface):
        self._inner = inner

    @property
    def inner(self) -> EmbeddingClientInterface:
        return self._inner

    def get_dimension(self) -> int:
        return self._inner.get_dimension()

    async def initialize(self) -> None:
        await self._inner.initialize()

    async def close(self) -> None:
        await self._inner.close()

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        try:
            return await self._inner.embed_batch(texts)
        except NonRetryableError:
            raise
        except EmbeddingClientError as e:
            logger.warning(
                f"Embedding failed, substituting zero vectors for {len(texts)} texts: {e}",
                extra={"text_count": len(texts)},
            )
            return [[0.0] * self.get_dimension() for _ in texts]
