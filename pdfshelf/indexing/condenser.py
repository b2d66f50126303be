"""
Searchable text condenser.

Reduces the full extracted text of a book to a bounded string made of
its most informative sentences followed by a keyword list. The result is
stored next to the book and used for lightweight local matching and
search snippets, independently of any external search engine.

All functions here are pure and never raise for string input.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

from pdfshelf.indexing.stopwords import DEFAULT_STOP_WORDS

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pdfshelf.config import IndexingConfig

MAX_INDEX_LENGTH = 10_000
MAX_SENTENCES = 50
MAX_KEYWORDS = 200
SNIPPET_LENGTH = 200

MIN_SENTENCE_CHARS = 10  # Fragments must be strictly longer
MIN_SENTENCE_WORDS = 3
MAX_SENTENCE_WORDS = 50
MEANINGFUL_RATIO = 0.3
MEANINGFUL_FLOOR = 3
QUERY_MATCH_RATIO = 0.7

_WHITESPACE = re.compile(r"\s+")
_SENTENCE_END = re.compile(r"[.!?]+")


def split_sentences(text: str) -> list[str]:
    """Split on runs of . ! ? and keep fragments longer than 10 chars.

    Fragments are returned unstripped.
    """
    return [s for s in _SENTENCE_END.split(text) if len(s.strip()) > MIN_SENTENCE_CHARS]


def _meaningful_words(words: list[str], stop_words: frozenset[str]) -> list[str]:
    return [w for w in words if len(w) > 2 and w.lower() not in stop_words]


def _select_sentences(
    sentences: Iterable[str], stop_words: frozenset[str]
) -> tuple[list[str], list[str]]:
    """Keep sentences dense in meaningful words.

    Returns (sentences, keywords); keywords are deduplicated in the order
    first seen.
    """
    selected = []
    keywords: dict[str, None] = {}

    for sentence in sentences:
        sentence = sentence.strip()
        words = sentence.split()

        if len(words) < MIN_SENTENCE_WORDS or len(words) > MAX_SENTENCE_WORDS:
            continue

        meaningful = _meaningful_words(words, stop_words)
        if len(meaningful) < min(MEANINGFUL_FLOOR, len(words) * MEANINGFUL_RATIO):
            continue

        selected.append(sentence)
        for word in meaningful:
            if len(word) > 3:
                keywords.setdefault(word.lower(), None)

    return selected, list(keywords)


def condense(
    full_text: str,
    *,
    max_length: int = MAX_INDEX_LENGTH,
    max_sentences: int = MAX_SENTENCES,
    max_keywords: int = MAX_KEYWORDS,
    stop_words: frozenset[str] = DEFAULT_STOP_WORDS,
) -> str:
    """Build the searchable index text for a document.

    Whitespace is collapsed and the text lower-cased once, up front.
    The output is the first ``max_sentences`` important sentences followed
    by the first ``max_keywords`` keywords, cut to ``max_length`` characters
    (possibly mid-word).

    Args:
        full_text: Raw extracted text, possibly noisy or empty.
        max_length: Hard cap on the result length.
        max_sentences: Number of sentences to keep.
        max_keywords: Number of keywords to keep.
        stop_words: Words that don't count as meaningful.

    Returns:
        The condensed text, or "" when nothing qualifies.
    """
    if not full_text:
        return ""

    normalized = _WHITESPACE.sub(" ", full_text).strip().lower()

    sentences, keywords = _select_sentences(split_sentences(normalized), stop_words)
    condensed = " ".join(sentences[:max_sentences] + keywords[:max_keywords])

    return condensed[:max_length]


def contains_query(searchable_text: str, query: str) -> bool:
    """Check whether a searchable text matches a query.

    An exact (case-insensitive) phrase match always succeeds. Otherwise at
    least 70% of the query words longer than 2 characters, rounded up, must
    appear somewhere in the text.
    """
    if not searchable_text or not query:
        return False

    normalized_query = query.lower().strip()
    if not normalized_query:
        return False
    normalized_text = searchable_text.lower()

    if normalized_query in normalized_text:
        return True

    query_words = [w for w in normalized_query.split() if len(w) > 2]
    if not query_words:
        return False

    matched = sum(1 for word in query_words if word in normalized_text)
    return matched >= math.ceil(len(query_words) * QUERY_MATCH_RATIO)


def extract_snippets(
    searchable_text: str,
    query: str,
    max_snippets: int = 3,
    *,
    snippet_length: int = SNIPPET_LENGTH,
) -> list[str]:
    """Return up to ``max_snippets`` sentences containing the query phrase.

    Only texts passing contains_query() are scanned, but each sentence must
    contain the whole query phrase, so a fuzzy match can produce no
    snippets. Long sentences are cut to ``snippet_length`` and get "...".
    """
    if not contains_query(searchable_text, query):
        return []

    normalized_query = query.lower().strip()
    snippets: list[str] = []

    for sentence in split_sentences(searchable_text):
        if len(snippets) >= max_snippets:
            break

        if normalized_query in sentence.lower():
            sentence = sentence.strip()
            snippet = sentence[:snippet_length]
            if len(sentence) > snippet_length:
                snippet += "..."
            snippets.append(snippet)

    return snippets


class TextIndexer:
    """Condenser and matcher bound to one IndexingConfig.

    Usage:
        indexer = TextIndexer(IndexingConfig(max_length=5000))
        text = indexer.condense(raw.text)
        if indexer.contains_query(text, "kant"):
            print(indexer.extract_snippets(text, "kant"))
    """

    def __init__(self, config: IndexingConfig | None = None):
        from pdfshelf.config import IndexingConfig

        self.config = config or IndexingConfig()

    @property
    def stop_words(self) -> frozenset[str]:
        return self.config.stop_words

    def condense(self, full_text: str) -> str:
        return condense(
            full_text,
            max_length=self.config.max_length,
            max_sentences=self.config.max_sentences,
            max_keywords=self.config.max_keywords,
            stop_words=self.config.stop_words,
        )

    def contains_query(self, searchable_text: str, query: str) -> bool:
        return contains_query(searchable_text, query)

    def extract_snippets(
        self, searchable_text: str, query: str, max_snippets: int | None = None
    ) -> list[str]:
        if max_snippets is None:
            max_snippets = self.config.max_snippets
        return extract_snippets(
            searchable_text,
            query,
            max_snippets,
            snippet_length=self.config.snippet_length,
        )
