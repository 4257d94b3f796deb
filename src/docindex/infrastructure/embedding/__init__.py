"""
Embedding client module for docindex.

Provides a local fastembed client, an OpenAI-compatible HTTP client with
retry and batch fallback, and a zero-vector fallback wrapper.
"""

from .errors import (
    BatchSizeError,
    EmbeddingClientError,
    NonRetryableError,
    RetryableError,
)
from .factory import create_embedding_client
from .fallback import ZeroVectorFallbackClient
from .fastembed_client import DEFAULT_LOCAL_MODEL, FastEmbedClient
from .interface import EmbeddingClientInterface
from .openai_client import OpenAIEmbeddingClient
from .retry import RetryConfig

__all__ = [
    "EmbeddingClientInterface",
    "FastEmbedClient",
    "OpenAIEmbeddingClient",
    "ZeroVectorFallbackClient",
    "create_embedding_client",
    "DEFAULT_LOCAL_MODEL",
    "EmbeddingClientError",
    "RetryableError",
    "NonRetryableError",
    "BatchSizeError",
    "RetryConfig",
]
