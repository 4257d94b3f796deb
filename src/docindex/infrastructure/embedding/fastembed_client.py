"""Local ONNX embedding client backed by fastembed."""

import asyncio
import logging
import threading
from typing import Any, Optional

from .errors import EmbeddingClientError, NonRetryableError
from .interface import EmbeddingClientInterface

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_MODEL = "sentence-transformers/all-MiniLM-L6-v2"

# Loaded models are shared by every client in the process, keyed by model name
_models: dict[str, Any] = {}
_models_lock = threading.Lock()


def _load_model(model_name: str) -> Any:
    with _models_lock:
        model = _models.get(model_name)
        if model is None:
            from fastembed import TextEmbedding

            logger.info(f"Loading embedding model {model_name}")
            try:
                model = TextEmbedding(model_name=model_name)
            except ValueError as e:
                raise NonRetryableError(f"Unsupported embedding model {model_name}: {e}") from e
            _models[model_name] = model
        return model


class FastEmbedClient(EmbeddingClientInterface):
    """
    Embeds text in-process with a fastembed ``TextEmbedding`` model.

    The model is a process-wide resource: it is loaded once, on first use or
    by ``initialize()``, and reused by every client configured with the same
    model name. Inference runs in the default executor so the event loop is
    not blocked.
    """

    def __init__(
        self,
        model: str = DEFAULT_LOCAL_MODEL,
        dimension: int = 384,
        batch_size: int = 64,
    ):
        self._model_name = model
        self._dimension = dimension
        self._batch_size = batch_size
        self._model: Optional[Any] = None

    def get_dimension(self) -> int:
        return self._dimension

    async def initialize(self) -> None:
        if self._model is None:
            loop = asyncio.get_running_loop()
            self._model = await loop.run_in_executor(None, _load_model, self._model_name)

    def _embed_sync(self, texts: list[str]) -> list[list[float]]:
        vectors = [
            [float(x) for x in vector]
            for vector in self._model.embed(texts, batch_size=self._batch_size)
        ]
        for vector in vectors:
            if len(vector) != self._dimension:
                raise NonRetryableError(
                    f"Model {self._model_name} produced {len(vector)}-dimensional vectors, "
                    f"expected {self._dimension}"
                )
        return vectors

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        await self.initialize()
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._embed_sync, texts)
        except EmbeddingClientError:
            raise
        except Exception as e:
            raise EmbeddingClientError(f"Local embedding failed: {e}") from e
