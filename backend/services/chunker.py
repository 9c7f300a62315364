"""Split long notification text into overlapping chunks.

Overlap ensures a field straddling a boundary is fully visible to at least
one of the two chunks around it.
"""

import logging
from collections.abc import Iterator

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4  # approximate for English text
MAX_TOKENS_PER_CHUNK = 12000
OVERLAP_CHARS = 500
PARAGRAPH_BREAK = "\n\n"


def chunk_text(
    text: str,
    max_tokens: int = MAX_TOKENS_PER_CHUNK,
    overlap_chars: int = OVERLAP_CHARS,
    chars_per_token: int = CHARS_PER_TOKEN,
) -> Iterator[str]:
    """Yield chunks of ``text`` in document order.

    Text within budget yields exactly one chunk, the input unchanged. Longer
    text is sliced at ``max_tokens * chars_per_token`` characters, preferring a
    paragraph break in the second half of the slice; each following chunk
    starts ``overlap_chars`` before the previous one ended.
    """
    max_chars = max_tokens * chars_per_token
    if max_chars <= 0:
        raise ValueError("max_tokens and chars_per_token must be positive")

    if len(text) <= max_chars:
        yield text
        return

    start = 0
    while start < len(text):
        end = start + max_chars

        if end < len(text):
            # Break at the last paragraph boundary that begins at or before `end`
            break_point = text.rfind(PARAGRAPH_BREAK, start, end + len(PARAGRAPH_BREAK))
            if break_point > start + max_chars * 0.5:
                end = break_point

        yield text[start:end].strip()

        if end >= len(text):
            return
        start = max(end - overlap_chars, start + 1)
