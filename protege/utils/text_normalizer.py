"""Whitespace normalisation and length capping for extracted source text.

Both the HTML scraper and the PDF extractor hand back text full of layout
whitespace (indentation, page breaks, runs of blank lines).  Everything
downstream -- the segmenter, the jargon extractor, the embedding model --
expects a single-spaced string, so both sources pass through
:func:`collapse_whitespace` before ingestion.
"""

from __future__ import annotations

import re

_WHITESPACE_RUN = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Replace every whitespace run with one space and trim the ends.

    >>> collapse_whitespace("  Hello\\n\\n   world\\t!  ")
    'Hello world !'
    """
    if not text:
        return ""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def cap_length(text: str, max_chars: int) -> str:
    """Return the first *max_chars* characters of *text*.

    A non-positive *max_chars* disables the cap.
    """
    if max_chars <= 0 or len(text) <= max_chars:
        return text
    return text[:max_chars]
