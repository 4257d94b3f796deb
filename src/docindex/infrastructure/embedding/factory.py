"""Construction of embedding clients from configuration."""

from docindex.core.config import EmbeddingConfig

from .fallback import ZeroVectorFallbackClient
from .fastembed_client import FastEmbedClient
from .interface import EmbeddingClientInterface
from .openai_client import OpenAIEmbeddingClient
from .retry import RetryConfig


def create_embedding_client(config: EmbeddingConfig) -> EmbeddingClientInterface:
    """
    Build the embedding client described by an EmbeddingConfig.

    Args:
        config: Embedding section of the configuration

    Returns:
        A FastEmbedClient or OpenAIEmbeddingClient, wrapped in a
        ZeroVectorFallbackClient when fallback_to_zero_vector is enabled

    Raises:
        ValueError: If the provider is unknown
    """
    client: EmbeddingClientInterface
    if config.provider == "local":
        client = FastEmbedClient(
            model=config.model,
            dimension=config.dimension,
            batch_size=config.batch_size,
        )
    elif config.provider == "openai":
        client = OpenAIEmbeddingClient(
            api_url=config.api_url,
            api_key=config.api_key,
            model=config.model,
            dimension=config.dimension,
            batch_size=config.batch_size,
            timeout=config.timeout,
            retry_config=RetryConfig(max_retries=config.max_retries),
        )
    else:
        raise ValueError(f"Unknown embedding provider: {config.provider}")

    if config.fallback_to_zero_vector:
        return ZeroVectorFallbackClient(client)
    return client
