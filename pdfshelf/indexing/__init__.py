"""
Searchable text indexing.

Condenses a book's extracted text into a bounded, keyword-dense string
and matches queries against it:
- condense(): important sentences plus keywords, capped at 10,000 chars
- contains_query(): exact phrase or 70%-of-words match
- extract_snippets(): sentences containing the query phrase
"""

from pdfshelf.indexing.condenser import (
    TextIndexer,
    condense,
    contains_query,
    extract_snippets,
    split_sentences,
)
from pdfshelf.indexing.stopwords import DEFAULT_STOP_WORDS

__all__ = [
    "TextIndexer",
    "condense",
    "contains_query",
    "extract_snippets",
    "split_sentences",
    "DEFAULT_STOP_WORDS",
]
