"""
pdfshelf: Index PDF books for a personal library.

This library ingests PDF books and produces what a library back end
needs to store and search them: metadata, a condensed searchable text,
per-page text, and a table of contents extracted by a cascade of
strategies (ML layout service, embedded outline, heading patterns).

Example:
    >>> import pdfshelf
    >>> book = pdfshelf.ingest("book.pdf")
    >>> print(book.metadata.title, book.toc.method.value)
    >>> for hit in pdfshelf.search_books([book], "categorical imperative"):
    ...     print(hit.snippets)
"""

from pdfshelf.config import (
    IndexingConfig,
    LibraryConfig,
    TocExtractionConfig,
    TocServiceConfig,
)
from pdfshelf.exceptions import (
    ConfigurationError,
    ExtractionError,
    PageNotFoundError,
    PdfShelfError,
    SearchQueryError,
    TocServiceError,
    UnsupportedFormatError,
)
from pdfshelf.indexing import (
    DEFAULT_STOP_WORDS,
    TextIndexer,
    condense,
    contains_query,
    extract_snippets,
)
from pdfshelf.library import (
    BookIndexer,
    detect_format,
    ingest,
    ingest_batch,
    reindex,
    search_books,
    supported_formats,
)
from pdfshelf.models import (
    BookMetadata,
    ExtractionMethod,
    HeadingCandidate,
    IndexedBook,
    PageContent,
    SearchHit,
    TocExtractionResult,
    TocNode,
)
from pdfshelf.toc import (
    TocExtractor,
    build_hierarchy,
    extract_toc,
    flatten,
    score_confidence,
)

__version__ = "0.1.0"
__all__ = [
    # Main API
    "ingest",
    "ingest_batch",
    "reindex",
    "search_books",
    "detect_format",
    "supported_formats",
    "BookIndexer",
    # Configuration
    "LibraryConfig",
    "IndexingConfig",
    "TocExtractionConfig",
    "TocServiceConfig",
    # Indexing
    "TextIndexer",
    "condense",
    "contains_query",
    "extract_snippets",
    "DEFAULT_STOP_WORDS",
    # Table of contents
    "TocExtractor",
    "extract_toc",
    "build_hierarchy",
    "flatten",
    "score_confidence",
    # Models
    "ExtractionMethod",
    "HeadingCandidate",
    "TocNode",
    "TocExtractionResult",
    "BookMetadata",
    "PageContent",
    "IndexedBook",
    "SearchHit",
    # Exceptions
    "PdfShelfError",
    "UnsupportedFormatError",
    "ExtractionError",
    "TocServiceError",
    "ConfigurationError",
    "PageNotFoundError",
    "SearchQueryError",
]
