"""
Data models for pdfshelf.

These models describe what ingesting a book produces: metadata, the
condensed searchable text, and the extracted table of contents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any


class ExtractionMethod(Enum):
    """Strategy that produced a table of contents."""

    ML_SERVICE = "ml-service"
    EMBEDDED = "embedded"
    PATTERN = "pattern"  # Also reported when every strategy failed


@dataclass(frozen=True)
class HeadingCandidate:
    """One flat outline entry proposed by a TOC source.

    Sources only emit candidates with a non-empty title, page >= 1
    and level between 1 and 6.
    """

    title: str
    page: int  # 1-based
    level: int  # 1=chapter, 2=section, 3=subsection


@dataclass
class TocNode:
    """A heading plus its nested sub-headings."""

    title: str
    page: int
    level: int
    children: list[TocNode] = field(default_factory=list)

    @classmethod
    def from_candidate(cls, candidate: HeadingCandidate) -> TocNode:
        return cls(title=candidate.title, page=candidate.page, level=candidate.level)

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    def to_dict(self) -> dict[str, Any]:
        """Nested dictionary representation for JSON serialization."""
        return {
            "title": self.title,
            "page": self.page,
            "level": self.level,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class TocExtractionResult:
    """Snapshot of one table-of-contents extraction."""

    items: list[TocNode]
    confidence: float  # 0.0 to 0.95
    method: ExtractionMethod
    extracted_at: datetime = field(default_factory=datetime.now)
    processing_time_ms: int = 0
    processing_log: list[str] = field(default_factory=list)

    @classmethod
    def failed(cls, processing_time_ms: int = 0, log: list[str] | None = None):
        """Result used when no strategy produced any heading."""
        return cls(
            items=[],
            confidence=0.0,
            method=ExtractionMethod.PATTERN,
            processing_time_ms=processing_time_ms,
            processing_log=list(log or []),
        )

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "confidence": self.confidence,
            "method": self.method.value,
            "extracted_at": self.extracted_at.isoformat(),
            "processing_time_ms": self.processing_time_ms,
        }


@dataclass
class BookMetadata:
    """PDF metadata for a book.

    Dates are kept as the raw PDF date strings (e.g. "D:20240101120000Z").
    """

    title: str | None = None
    author: str | None = None
    subject: str | None = None
    keywords: str | None = None
    creator: str | None = None
    producer: str | None = None
    creation_date: str | None = None
    modification_date: str | None = None
    page_count: int = 0
    pdf_version: str | None = None  # e.g. "PDF 1.7"
    text_length: int = 0


@dataclass(frozen=True)
class PageContent:
    """Text of one page (1-based page number)."""

    page_number: int
    text: str


@dataclass
class IndexedBook:
    """
    The result of ingesting one PDF.

    Example:
        >>> book = pdfshelf.ingest("book.pdf")
        >>> print(book.metadata.title)
        >>> for node in book.toc.items:
        ...     print(node.title, node.page)
    """

    source_path: Path
    metadata: BookMetadata
    searchable_text: str
    toc: TocExtractionResult

    page_contents: list[PageContent] = field(default_factory=list)

    # Diagnostics
    warnings: list[str] = field(default_factory=list)
    processing_log: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the book
        """
        return {
            "source_path": str(self.source_path),
            "metadata": {
                "title": self.metadata.title,
                "author": self.metadata.author,
                "subject": self.metadata.subject,
                "keywords": self.metadata.keywords,
                "page_count": self.metadata.page_count,
                "text_length": self.metadata.text_length,
            },
            "searchable_text": self.searchable_text,
            "toc": self.toc.to_dict(),
            "warnings": self.warnings,
        }


@dataclass
class SearchHit:
    """A book matching a local content search, with matching sentences."""

    book: IndexedBook
    snippets: list[str] = field(default_factory=list)
