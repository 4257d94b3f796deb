"""Exponential backoff for transient embedding failures."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from .errors import EmbeddingClientError, RetryableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Retry behaviour of an embedding client.

    Attributes:
        max_retries: Retries after the first attempt for transient errors.
        base_delay: Delay in seconds before the first retry.
        max_delay: Upper bound on any single delay.
        exponential_base: Growth factor between consecutive delays.
        enable_batch_fallback: Halve the batch on token limit errors.
        min_batch_size: Smallest batch the fallback may shrink to.
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2.0
    enable_batch_fallback: bool = True
    min_batch_size: int = 1

    def delay_for(self, attempt: int) -> float:
        """Backoff delay after the given zero-based failed attempt."""
        return min(self.base_delay * (self.exponential_base**attempt), self.max_delay)


async def with_retry(operation: Callable[[], Awaitable[T]], config: RetryConfig) -> T:
    """
    Run an async operation, retrying RetryableError with exponential backoff.

    Any other exception propagates immediately.

    Raises:
        EmbeddingClientError: When every attempt failed with a RetryableError
    """
    attempts = config.max_retries + 1
    for attempt in range(attempts):
        try:
            return await operation()
        except RetryableError as e:
            if attempt == attempts - 1:
                logger.error(f"All {attempts} embedding attempts failed. Last error: {e}")
                raise EmbeddingClientError(f"Failed after {attempts} attempts: {e}") from e

            delay = config.delay_for(attempt)
            logger.warning(f"Attempt {attempt + 1} failed: {e}. Retrying in {delay:.1f}s...")
            await asyncio.sleep(delay)

    raise EmbeddingClientError("Retry loop exited without a result")
