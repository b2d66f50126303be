"""
Book ingestion orchestrator.

This module provides the main `ingest()` function that turns a PDF into
an IndexedBook by wiring together:
- PDFReader (raw extraction)
- TextIndexer (searchable index text)
- TocExtractor (table of contents)

It also provides a local content search over already ingested books.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from pdfshelf.config import LibraryConfig
from pdfshelf.exceptions import ExtractionError, SearchQueryError, UnsupportedFormatError
from pdfshelf.indexing.condenser import TextIndexer
from pdfshelf.models import BookMetadata, IndexedBook, SearchHit, TocExtractionResult
from pdfshelf.readers.pdf_reader import PDFReader, RawDocument
from pdfshelf.toc.cascading import TocExtractor

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


# ═══════════════════════════════════════════════════════════════════════════════
# Book Indexer
# ═══════════════════════════════════════════════════════════════════════════════


class BookIndexer:
    """
    Builds an IndexedBook from a RawDocument.

    Text indexing and TOC extraction are enrichments: if either fails the
    book is still built, with an empty searchable text or an empty TOC,
    and a warning is recorded.
    """

    def __init__(
        self,
        config: LibraryConfig | None = None,
        *,
        text_indexer: TextIndexer | None = None,
        toc_extractor: TocExtractor | None = None,
    ) -> None:
        """Initialize the indexer."""
        self.config = config or LibraryConfig()
        self.text_indexer = text_indexer or TextIndexer(self.config.indexing)
        self.toc_extractor = toc_extractor or TocExtractor(self.config.toc)

    def build(self, raw_doc: RawDocument) -> IndexedBook:
        """
        Build an IndexedBook from a RawDocument.

        Args:
            raw_doc: The raw extracted PDF data

        Returns:
            A fully populated IndexedBook
        """
        log = [f"Starting build from {raw_doc.source_path}"]
        warnings: list[str] = []

        metadata = self._build_metadata(raw_doc)
        searchable_text = self._index_text(raw_doc, log, warnings)
        toc = self._extract_toc(raw_doc, log, warnings)

        log.append(
            f"Build complete: {metadata.page_count} pages, "
            f"{len(searchable_text)} indexed chars, {len(toc.items)} top-level TOC entries"
        )

        return IndexedBook(
            source_path=raw_doc.source_path,
            metadata=metadata,
            searchable_text=searchable_text,
            toc=toc,
            page_contents=raw_doc.page_contents(),
            warnings=warnings,
            processing_log=log,
        )

    def _index_text(self, raw_doc: RawDocument, log: list[str], warnings: list[str]) -> str:
        """Condense the full text into the searchable index text."""
        raw_text = raw_doc.text
        log.append(f"Raw text: {len(raw_text)} chars")

        try:
            searchable_text = self.text_indexer.condense(raw_text)
        except Exception as e:
            warnings.append(f"Text indexing failed: {e}")
            logger.warning("Text indexing failed for %s: %s", raw_doc.source_path, e)
            return ""

        log.append(f"Searchable index: {len(searchable_text)} chars")
        return searchable_text

    def _extract_toc(
        self, raw_doc: RawDocument, log: list[str], warnings: list[str]
    ) -> TocExtractionResult:
        """Extract the table of contents using the cascading extractor."""
        try:
            toc = self.toc_extractor.extract(raw_doc)
        except Exception as e:
            warnings.append(f"TOC extraction failed: {e}")
            logger.warning("TOC extraction failed for %s: %s", raw_doc.source_path, e)
            return TocExtractionResult.failed(log=[f"TOC extraction failed: {e}"])

        log.extend(toc.processing_log)
        log.append(f"TOC extraction: {toc.method.value} (conf={toc.confidence:.2f})")
        return toc

    def _build_metadata(self, raw_doc: RawDocument) -> BookMetadata:
        """Build book metadata from raw PDF metadata."""
        raw_meta = raw_doc.metadata

        return BookMetadata(
            title=raw_meta.get("title"),
            author=raw_meta.get("author"),
            subject=raw_meta.get("subject"),
            keywords=raw_meta.get("keywords"),
            creator=raw_meta.get("creator"),
            producer=raw_meta.get("producer"),
            creation_date=raw_meta.get("creation_date"),
            modification_date=raw_meta.get("mod_date"),
            page_count=raw_doc.page_count,
            pdf_version=raw_meta.get("format"),
            text_length=len(raw_doc.text),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════════


def ingest(
    source: str | Path,
    config: LibraryConfig | None = None,
) -> IndexedBook:
    """
    Ingest a PDF into an IndexedBook.

    This is the main entry point for pdfshelf. It handles:
    - Format detection
    - Raw extraction (PDFReader)
    - Searchable index text (TextIndexer)
    - Table of contents (TocExtractor)

    Args:
        source: Path to the PDF file
        config: Library configuration (uses defaults if None)

    Returns:
        IndexedBook with metadata, searchable text and TOC

    Raises:
        FileNotFoundError: If source doesn't exist
        UnsupportedFormatError: If format not supported
        ExtractionError: If reading fails (unless on_extraction_error="warn")

    Example:
        >>> book = ingest("kant.pdf")
        >>> print(book.toc.method, book.toc.confidence)
    """
    source = Path(source)
    config = config or LibraryConfig()

    # Validate file exists
    if not source.exists():
        raise FileNotFoundError(f"Source file not found: {source}")

    # Raises UnsupportedFormatError for anything but PDF
    detect_format(source)

    try:
        raw_doc = PDFReader().read(source)
    except Exception as e:
        if config.on_extraction_error == "warn":
            logger.warning("Extraction error for %s: %s", source, e)
            # Return an empty book carrying the error
            return IndexedBook(
                source_path=source,
                metadata=BookMetadata(),
                searchable_text="",
                toc=TocExtractionResult.failed(),
                warnings=[f"Extraction failed: {e}"],
                processing_log=[f"Extraction failed: {e}"],
            )
        raise ExtractionError(f"Failed to read {source}: {e}") from e

    return BookIndexer(config).build(raw_doc)


def ingest_batch(
    sources: Iterable[str | Path],
    config: LibraryConfig | None = None,
) -> Iterator[tuple[Path, IndexedBook | Exception]]:
    """
    Ingest several PDFs, yielding results as they complete.

    Args:
        sources: Paths to PDF files
        config: Library configuration

    Yields:
        (path, result) tuples where result is IndexedBook or Exception
    """
    config = config or LibraryConfig()

    for source in sources:
        source = Path(source)
        try:
            yield (source, ingest(source, config))
        except Exception as e:
            if config.on_extraction_error == "skip":
                logger.info("Skipping %s: %s", source, e)
                continue
            yield (source, e)


def reindex(book: IndexedBook, config: LibraryConfig | None = None) -> IndexedBook:
    """
    Rebuild a book from its source file.

    The returned book's searchable text and TOC replace the old ones;
    the given book is left unchanged.

    Raises:
        ExtractionError: If the source can no longer be read.
    """
    try:
        raw_doc = PDFReader().read(book.source_path)
    except Exception as e:
        raise ExtractionError(f"Failed to reindex {book.source_path}: {e}") from e

    logger.info("Reindexing %s", book.source_path)
    return BookIndexer(config).build(raw_doc)


def search_books(
    books: Iterable[IndexedBook],
    query: str,
    *,
    limit: int = 20,
    max_snippets: int = 3,
    text_indexer: TextIndexer | None = None,
) -> list[SearchHit]:
    """
    Search the searchable texts of ingested books.

    Books are returned in the given order, with up to ``max_snippets``
    matching sentences each.

    Raises:
        SearchQueryError: If the query has fewer than 2 characters.
    """
    if not query or len(query.strip()) < MIN_QUERY_LENGTH:
        raise SearchQueryError(
            f"Search query must be at least {MIN_QUERY_LENGTH} characters long"
        )

    indexer = text_indexer or TextIndexer()
    hits: list[SearchHit] = []

    for book in books:
        if len(hits) >= limit:
            break
        if not indexer.contains_query(book.searchable_text, query):
            continue
        snippets = indexer.extract_snippets(book.searchable_text, query, max_snippets)
        hits.append(SearchHit(book=book, snippets=snippets))

    logger.info('Search "%s" returned %d results', query.strip(), len(hits))
    return hits


def detect_format(path: str | Path) -> str:
    """
    Detect document format from file extension and magic bytes.

    Args:
        path: Path to document file

    Returns:
        Format string, one of supported_formats()

    Raises:
        UnsupportedFormatError: If the file is not a PDF
    """
    path = Path(path)

    # Check extension first
    if path.suffix.lower() == ".pdf":
        return "pdf"

    # Try magic bytes for PDF
    try:
        with open(path, "rb") as f:
            header = f.read(8)
            if header.startswith(b"%PDF"):
                return "pdf"
    except OSError:
        pass

    raise UnsupportedFormatError(
        f"Unsupported format: {path.suffix or path.name}. Currently only PDF is supported."
    )


def supported_formats() -> list[str]:
    """Return list of currently supported input formats."""
    return ["pdf"]
