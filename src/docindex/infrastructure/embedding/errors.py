"""Exception types raised by embedding clients."""


class EmbeddingClientError(Exception):
    """Base exception for embedding failures."""

    pass


class RetryableError(EmbeddingClientError):
    """Transient failure worth retrying (rate limit, timeout, 5xx)."""

    pass


class NonRetryableError(EmbeddingClientError):
    """Permanent failure (bad credentials, malformed request or response)."""

    pass


class BatchSizeError(EmbeddingClientError):
    """The request exceeded the provider's token limit.

    Clients that support it halve the batch and resend.
    """

    pass
