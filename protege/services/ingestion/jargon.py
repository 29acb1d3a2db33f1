"""Frequency-ranked jargon extraction.

Picks out the terms a learner is likely to parrot back without
understanding: long words and technical-looking identifiers.  Two passes
feed one shared frequency counter:

* every word longer than 10 characters that is not a stop word and is not
  an all-caps acronym scores +1 per occurrence;
* every camelCase, PascalCase-with-internal-capital or lowercase-hyphenated
  term of 6+ characters that is not a stop word scores +2 per occurrence.

Terms are reported lowercased, highest score first.  Ties keep the order in
which the terms were first seen.
"""

from __future__ import annotations

import re

import structlog

logger = structlog.get_logger(logger_name=__name__)

_WORD_PATTERN = re.compile(r"\b[a-zA-Z][a-zA-Z0-9]*\b", re.ASCII)
_TECHNICAL_PATTERN = re.compile(
    r"\b[a-z]+[A-Z][a-zA-Z]*\b"  # camelCase
    r"|\b[A-Z][a-z]+[A-Z][a-zA-Z]*\b"  # PascalCase with an internal capital
    r"|\b[a-z]+-[a-z]+\b",  # hyphenated-lowercase
    re.ASCII,
)
_HAS_LOWERCASE = re.compile(r"[a-z]")

_MIN_LONG_WORD_LENGTH = 11
_MIN_TECHNICAL_LENGTH = 6
_LONG_WORD_WEIGHT = 1
_TECHNICAL_WEIGHT = 2

STOP_WORDS: frozenset[str] = frozenset(
    {
        # Function words and high-frequency verbs.
        "the", "be", "to", "of", "and", "a", "in", "that", "have", "i",
        "it", "for", "not", "on", "with", "he", "as", "you", "do", "at",
        "this", "but", "his", "by", "from", "they", "we", "say", "her", "she",
        "or", "an", "will", "my", "one", "all", "would", "there", "their",
        "what", "so", "up", "out", "if", "about", "who", "get", "which", "go",
        "me", "when", "make", "can", "like", "time", "no", "just", "him", "know",
        "take", "people", "into", "year", "your", "good", "some", "could", "them",
        "see", "other", "than", "then", "now", "look", "only", "come", "its", "over",
        "think", "also", "back", "after", "use", "two", "how", "our", "work", "first",
        "well", "way", "even", "new", "want", "because", "any", "these", "give", "day",
        "most", "us", "is", "was", "are", "been", "has", "had", "were", "said", "did",
        "having", "may", "should", "might", "must", "shall", "being",
        "does", "done", "very", "more", "such", "through", "between", "during", "before",
        "above", "below", "under", "again", "further", "once", "here", "where",
        "why", "both", "each", "few", "own", "same", "too",
        # Connectives and generic academic vocabulary.
        "however", "therefore", "thus", "hence", "moreover", "furthermore", "nevertheless",
        "although", "though", "while", "whereas", "since", "unless", "until", "whether",
        "example", "including", "many", "much", "several", "various", "different",
        "similar", "related", "associated", "particular", "specific", "general", "common",
        "important", "significant", "major", "main", "primary", "secondary", "basic",
        "essential", "fundamental", "critical", "key", "central", "crucial", "vital",
    }
)


def extract_jargon(text: str, max_jargon_words: int = 30) -> list[str]:
    """Return up to *max_jargon_words* lowercased jargon terms from *text*.

    Parameters
    ----------
    text:
        Normalised source text.
    max_jargon_words:
        Maximum number of terms to return.

    Returns
    -------
    list[str]
        Distinct terms ordered by descending score.
    """
    if not text or max_jargon_words <= 0:
        return []

    scores: dict[str, int] = {}

    for match in _WORD_PATTERN.finditer(text):
        word = match.group(0)
        lowered = word.lower()
        if (
            len(lowered) >= _MIN_LONG_WORD_LENGTH
            and lowered not in STOP_WORDS
            and _HAS_LOWERCASE.search(word)
        ):
            scores[lowered] = scores.get(lowered, 0) + _LONG_WORD_WEIGHT

    for match in _TECHNICAL_PATTERN.finditer(text):
        lowered = match.group(0).lower()
        if len(lowered) >= _MIN_TECHNICAL_LENGTH and lowered not in STOP_WORDS:
            scores[lowered] = scores.get(lowered, 0) + _TECHNICAL_WEIGHT

    # sorted() is stable: equal scores stay in first-seen order.
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    return [term for term, _ in ranked[:max_jargon_words]]


class JargonExtractor:
    """Configured wrapper around :func:`extract_jargon`."""

    def __init__(self, max_words: int = 30) -> None:
        self._max_words = max_words

    @property
    def max_words(self) -> int:
        return self._max_words

    def extract(self, text: str, max_words: int | None = None) -> list[str]:
        limit = self._max_words if max_words is None else max_words
        terms = extract_jargon(text, limit)
        logger.debug("jargon_extracted", term_count=len(terms), limit=limit)
        return terms
