"""
Paragraph and sentence aware text splitting.
"""

import re

_PARAGRAPH_BREAK = re.compile(r"\n{2,}")

# A sentence runs up to and including its terminator run. The final
# alternative keeps trailing text that has no terminator.
_SENTENCE = re.compile(r"[^.!?\n]*(?:[.!?\n]+|$)")


def _split_sentences(paragraph: str) -> list[str]:
    return [match for match in _SENTENCE.findall(paragraph) if match]


def _pack_sentences(sentences: list[str], chunk_size: int) -> list[str]:
    """Greedily accumulate sentences into chunks of at most chunk_size.

    A sentence longer than chunk_size becomes a chunk of its own.
    """
    chunks: list[str] = []
    buffer = ""
    for sentence in sentences:
        if len(buffer) + len(sentence) > chunk_size:
            if buffer:
                chunks.append(buffer)
            buffer = sentence
        else:
            buffer += sentence
    if buffer:
        chunks.append(buffer)
    return chunks


def split_text(text: str, chunk_size: int, chunk_overlap: int) -> list[str]:
    """
    Split text into chunks along paragraph and sentence boundaries.

    Paragraphs are separated by two or more line breaks. A paragraph that fits
    within chunk_size is emitted whole; a longer one is split into sentences
    which are packed greedily. When chunk_overlap is positive, every chunk but
    the first is prefixed with the last chunk_overlap characters of the chunk
    before it (taken before any overlap was added).

    Args:
        text: Plain text to split
        chunk_size: Target maximum chunk length in characters
        chunk_overlap: Number of trailing characters carried into the next chunk

    Returns:
        Ordered list of chunk strings; empty for empty or whitespace-only text

    Raises:
        ValueError: If chunk_size < 1 or chunk_overlap < 0
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
    if chunk_overlap < 0:
        raise ValueError(f"chunk_overlap must not be negative, got {chunk_overlap}")

    base: list[str] = []
    for paragraph in _PARAGRAPH_BREAK.split(text):
        if not paragraph.strip():
            continue
        if len(paragraph) <= chunk_size:
            base.append(paragraph)
        else:
            base.extend(_pack_sentences(_split_sentences(paragraph), chunk_size))

    if chunk_overlap == 0 or len(base) < 2:
        return base

    chunks = [base[0]]
    for previous, current in zip(base, base[1:]):
        chunks.append(previous[-chunk_overlap:] + current)
    return chunks
