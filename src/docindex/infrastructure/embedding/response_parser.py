"""Parsing of OpenAI-compatible embedding responses."""

from .errors import NonRetryableError

# Fragments seen in 400 responses when a request is over the token limit
_TOKEN_LIMIT_HINTS = ("limit", "exceed", "maximum", "too many", "too long")


def parse_embedding_response(
    response_data: dict, expected_count: int, expected_dimension: int
) -> list[list[float]]:
    """
    Extract embeddings from an API response, ordered by their index.

    Raises:
        NonRetryableError: If the response is malformed, holds the wrong number
            of embeddings, or any embedding has the wrong width
    """
    try:
        data = sorted(response_data["data"], key=lambda item: item["index"])
        embeddings = [[float(x) for x in item["embedding"]] for item in data]
    except (KeyError, TypeError, ValueError) as e:
        raise NonRetryableError(f"Invalid response format: {e}") from e

    if len(embeddings) != expected_count:
        raise NonRetryableError(f"Expected {expected_count} embeddings, got {len(embeddings)}")

    for embedding in embeddings:
        if len(embedding) != expected_dimension:
            raise NonRetryableError(
                f"Embedding dimension mismatch: expected {expected_dimension}, "
                f"got {len(embedding)}"
            )

    return embeddings


def is_token_limit_error(status_code: int, response_text: str) -> bool:
    """
    Check whether an error response means the batch was too large.

    HTTP 413 always qualifies; a 400 qualifies when its body mentions tokens
    together with a limit.
    """
    if status_code == 413:
        return True
    if status_code != 400:
        return False
    body = response_text.lower()
    return "token" in body and any(hint in body for hint in _TOKEN_LIMIT_HINTS)
