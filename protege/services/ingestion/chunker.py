"""Character-window text chunking with boundary-aware cuts.

Splits normalised source text into overlapping chunks of at most
``max_chunk_size`` characters for embedding.

The cut point for every window except the last is chosen in priority order:

1. **Paragraph break** -- the last ``"\\n\\n"`` inside the search window; the
   cut falls right after it.
2. **Sentence end** -- the rightmost of ``". "``, ``"! "``, ``"? "``,
   ``".\\n"``, ``"!\\n"``, ``"?\\n"``; the cut falls right after the
   punctuation mark.
3. **Hard cut** at ``start + max_chunk_size``.

The search window is the last ``overlap`` characters of the candidate
window, so a boundary is only taken if it leaves the chunk at least
``max_chunk_size - overlap`` characters long.  Consecutive chunks then share
up to ``overlap`` characters of context.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(logger_name=__name__)

_PARAGRAPH_BREAK = "\n\n"
_SENTENCE_ENDINGS = (". ", "! ", "? ", ".\n", "!\n", "?\n")


def _find_cut(text: str, start: int, end: int, overlap: int) -> int:
    """Return the cut position for a non-final window ``text[start:end]``."""
    window_start = max(start, end - overlap)
    window = text[window_start:end]

    paragraph = window.rfind(_PARAGRAPH_BREAK)
    if paragraph != -1:
        return window_start + paragraph + len(_PARAGRAPH_BREAK)

    sentence = max(window.rfind(marker) for marker in _SENTENCE_ENDINGS)
    if sentence != -1:
        # Keep the punctuation mark, leave the trailing space/newline.
        return window_start + sentence + 1

    return end


def chunk_text(text: str, max_chunk_size: int = 1000, overlap: int = 200) -> list[str]:
    """Split *text* into trimmed, non-empty chunks of at most *max_chunk_size* chars.

    Parameters
    ----------
    text:
        Normalised source text.
    max_chunk_size:
        Upper bound on each chunk's length before trimming.
    overlap:
        Characters shared between consecutive chunks.  Values at or above
        *max_chunk_size* degrade to back-to-back chunks with no overlap.

    Returns
    -------
    list[str]
        Chunks in source order.  Empty for empty or whitespace-only input.
    """
    if not text:
        return []
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be positive")
    overlap = max(0, overlap)

    if len(text) <= max_chunk_size:
        stripped = text.strip()
        return [stripped] if stripped else []

    chunks: list[str] = []
    text_length = len(text)
    start = 0
    last_chunk_start = 0

    while start < text_length:
        end = start + max_chunk_size
        if end < text_length:
            end = _find_cut(text, start, end, overlap)
        else:
            end = text_length

        raw = text[start:end]
        chunk = raw.strip()
        if chunk:
            chunks.append(chunk)
            last_chunk_start = start + (len(raw) - len(raw.lstrip()))

        if end >= text_length:
            break

        # Step back by the overlap, but never to or before the previous
        # chunk's start; that would repeat it.
        next_start = end - overlap
        if next_start <= max(last_chunk_start, start):
            next_start = end
        start = next_start

    return chunks


class TextChunker:
    """Configured wrapper around :func:`chunk_text`.

    Parameters
    ----------
    chunk_size:
        Maximum characters per chunk (default 1000).
    overlap:
        Characters of overlap between consecutive chunks (default 200).
    """

    def __init__(self, chunk_size: int = 1000, overlap: int = 200) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._chunk_size = chunk_size
        self._overlap = max(0, overlap)

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def overlap(self) -> int:
        return self._overlap

    def chunk(self, text: str) -> list[str]:
        chunks = chunk_text(text, self._chunk_size, self._overlap)
        logger.debug(
            "chunking_complete",
            input_chars=len(text),
            chunk_count=len(chunks),
            chunk_size=self._chunk_size,
            overlap=self._overlap,
        )
        return chunks
