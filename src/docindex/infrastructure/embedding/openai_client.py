"""OpenAI-compatible HTTP embedding client."""

import logging
from typing import Optional

import httpx

from .errors import BatchSizeError, NonRetryableError, RetryableError
from .interface import EmbeddingClientInterface
from .response_parser import is_token_limit_error, parse_embedding_response
from .retry import RetryConfig, with_retry

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


class OpenAIEmbeddingClient(EmbeddingClientInterface):
    """
    Embedding client for OpenAI-compatible ``/embeddings`` endpoints.

    Texts are sent in batches of at most ``batch_size``. Rate limits, server
    errors and network failures are retried with exponential backoff. When the
    provider rejects a batch as too large, the batch is halved and resent, and
    the smaller size is kept for the rest of the call.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        model: str = "text-embedding-3-small",
        dimension: int = 1536,
        batch_size: int = 64,
        timeout: float = 30.0,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the embedding client.

        Args:
            api_url: Full URL of the embeddings endpoint
            api_key: Bearer token for the API
            model: Model name sent with every request
            dimension: Expected embedding dimension
            batch_size: Maximum texts per request
            timeout: Request timeout in seconds
            retry_config: Retry and batch fallback behaviour
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self._api_url = api_url.rstrip("/")
        self._api_key = api_key
        self._model = model
        self._dimension = dimension
        self._batch_size = batch_size
        self._timeout = timeout
        self._retry_config = retry_config or RetryConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def get_dimension(self) -> int:
        return self._dimension

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the pooled HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Generate embeddings for texts, preserving input order.

        Raises:
            EmbeddingClientError: If embedding fails after retries
            NonRetryableError: If a single text exceeds the token limit
        """
        if not texts:
            return []

        config = self._retry_config
        batch_size = self._batch_size
        embeddings: list[list[float]] = []
        start = 0

        while start < len(texts):
            batch = texts[start : start + batch_size]
            try:
                embeddings.extend(
                    await with_retry(lambda b=batch: self._request(b), config)
                )
            except BatchSizeError as e:
                if not config.enable_batch_fallback:
                    raise NonRetryableError(
                        f"Token limit exceeded and batch fallback is disabled: {e}"
                    ) from e
                if batch_size <= config.min_batch_size:
                    raise NonRetryableError(
                        f"Text at index {start} exceeds the token limit: {e}"
                    ) from e
                smaller = max(config.min_batch_size, batch_size // 2)
                logger.warning(
                    f"Token limit exceeded, reducing batch size {batch_size} -> {smaller}"
                )
                batch_size = smaller
                continue
            start += len(batch)

        return embeddings

    async def _request(self, texts: list[str]) -> list[list[float]]:
        """Send one embeddings request and classify any failure."""
        headers = {"Authorization": f"Bearer {self._api_key}"}
        payload = {"input": texts, "model": self._model, "encoding_format": "float"}
        context = f"url={self._api_url}, model={self._model}, batch={len(texts)}"

        try:
            response = await self._get_client().post(self._api_url, headers=headers, json=payload)
        except httpx.RequestError as e:
            raise RetryableError(f"Request failed: {e!r}") from e

        status = response.status_code
        if status == 200:
            return parse_embedding_response(response.json(), len(texts), self._dimension)
        if is_token_limit_error(status, response.text):
            raise BatchSizeError(f"Token limit exceeded: {status} - {response.text} ({context})")
        if status in _RETRYABLE_STATUS:
            raise RetryableError(f"Transient API error: {status} - {response.text}")
        if status in (401, 403):
            raise NonRetryableError(f"Authentication failed: {status} ({context})")
        raise NonRetryableError(f"API error: {status} - {response.text} ({context})")
