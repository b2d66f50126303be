"""
PDF Reader using PyMuPDF (fitz).

Extracts page text, the embedded outline and document metadata.
Table-of-contents detection is handled by the toc module (TocExtractor),
text condensing by the indexing module.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import fitz  # PyMuPDF

from pdfshelf.exceptions import PageNotFoundError
from pdfshelf.models import PageContent

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


@dataclass
class PageData:
    """Raw data extracted from a single PDF page."""

    index: int  # 0-based page index
    label: str  # Page label (e.g., "42", "xiv")
    text: str  # Full text of page

    @property
    def page_number(self) -> int:
        """1-based page number."""
        return self.index + 1


@dataclass
class OutlineEntry:
    """An entry from the PDF outline/bookmarks.

    From PyMuPDF's doc.get_toc() which returns [level, title, page_num].
    """

    level: int  # 1=chapter, 2=section, etc.
    title: str
    page_index: int  # 0-based page index


@dataclass
class RawDocument:
    """Raw extracted data from a PDF, before indexing and TOC extraction."""

    source_path: Path
    page_count: int
    pages: list[PageData]
    outline: list[OutlineEntry]
    metadata: dict[str, str | None]

    _text_cache: str | None = field(default=None, repr=False)

    @property
    def text(self) -> str:
        """Full document text (cached)."""
        if self._text_cache is None:
            self._text_cache = "\n\n".join(page.text for page in self.pages if page.text)
        return self._text_cache

    @property
    def has_outline(self) -> bool:
        """Whether the PDF has an outline/bookmarks."""
        return len(self.outline) > 0

    def page_text(self, page_number: int) -> str:
        """Text of a 1-based page.

        Raises:
            PageNotFoundError: If the page is out of range or has no text.
        """
        if page_number < 1:
            raise PageNotFoundError(
                f"Invalid page number: {page_number}. Must be greater than 0."
            )
        if page_number > len(self.pages):
            raise PageNotFoundError(
                f"Page {page_number} out of range. PDF has {self.page_count} pages."
            )

        text = self.pages[page_number - 1].text.strip()
        if not text:
            raise PageNotFoundError(f"No text content found on page {page_number}")
        return text

    def page_contents(self) -> list[PageContent]:
        """Pages that have text, with 1-based numbers."""
        return [
            PageContent(page_number=page.page_number, text=page.text)
            for page in self.pages
            if page.text
        ]


class PDFReader:
    """Extracts raw data from PDFs using PyMuPDF.

    Usage:
        reader = PDFReader()
        raw = reader.read("/path/to/book.pdf")
        # raw.pages, raw.outline, raw.text, etc.
    """

    def read(self, path: str | Path) -> RawDocument:
        """Read a PDF file and extract raw data.

        Args:
            path: Path to PDF file.

        Returns:
            RawDocument with pages, outline, metadata.

        Raises:
            FileNotFoundError: If file doesn't exist.
            ValueError: If file is not a valid PDF.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"PDF not found: {path}")

        try:
            doc = fitz.open(path)
        except Exception as e:
            raise ValueError(f"Failed to open PDF: {e}") from e

        try:
            pages = list(self._extract_pages(doc))
            outline = self._extract_outline(doc)
            metadata = self._extract_metadata(doc)

            return RawDocument(
                source_path=path,
                page_count=len(doc),
                pages=pages,
                outline=outline,
                metadata=metadata,
            )
        finally:
            doc.close()

    def _extract_pages(self, doc: fitz.Document) -> Iterator[PageData]:
        """Extract data from each page."""
        for page_idx in range(len(doc)):
            page = doc[page_idx]
            yield PageData(
                index=page_idx,
                label=page.get_label() or str(page_idx + 1),
                text=page.get_text("text").strip(),
            )

    def _extract_outline(self, doc: fitz.Document) -> list[OutlineEntry]:
        """Extract PDF outline/bookmarks."""
        outline = []

        try:
            toc = doc.get_toc()
        except Exception as e:
            # Some PDFs have malformed outlines
            logger.warning("Could not read outline of %s: %s", doc.name, e)
            return outline

        for level, title, page_num in toc:
            # page_num is 1-based (or -1 when unresolved), convert to 0-based
            outline.append(
                OutlineEntry(
                    level=level,
                    title=title.strip(),
                    page_index=max(0, page_num - 1),
                )
            )

        return outline

    def _extract_metadata(self, doc: fitz.Document) -> dict[str, str | None]:
        """Extract PDF metadata."""
        meta = doc.metadata or {}
        return {
            "title": meta.get("title") or None,
            "author": meta.get("author") or None,
            "subject": meta.get("subject") or None,
            "keywords": meta.get("keywords") or None,
            "creator": meta.get("creator") or None,
            "producer": meta.get("producer") or None,
            "creation_date": meta.get("creationDate") or None,
            "mod_date": meta.get("modDate") or None,
            "format": meta.get("format") or None,
        }
