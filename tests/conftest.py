"""
Pytest configuration and fixtures for pdfshelf tests.
"""

from collections.abc import Callable
from pathlib import Path

import fitz
import pytest

from pdfshelf.readers.pdf_reader import OutlineEntry, PageData, RawDocument

BOOK_PAGES = [
    "Chapter 1\n"
    "Kant wrote the critique of pure reason in 1781.\n"
    "The critique examines the limits of human knowledge.",
    "1.1 Transcendental Aesthetic\n"
    "Space and time are forms of sensible intuition.\n"
    "Judgements can be analytic or synthetic.",
    "",
    "Chapter 2\n"
    "The categorical imperative grounds moral philosophy.",
]


def write_pdf(
    path: Path,
    pages: list[str],
    toc: list[list] | None = None,
    metadata: dict[str, str] | None = None,
) -> Path:
    """Write a small PDF with one text block per page."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text, fontsize=11)
    if toc:
        doc.set_toc(toc)
    if metadata:
        doc.set_metadata(metadata)
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def make_pdf(tmp_path) -> Callable[..., Path]:
    """Factory writing PDFs into the test's temporary directory."""

    def factory(name: str = "book.pdf", pages: list[str] | None = None, **kwargs) -> Path:
        return write_pdf(tmp_path / name, pages if pages is not None else BOOK_PAGES, **kwargs)

    return factory


@pytest.fixture
def outlined_pdf(make_pdf) -> Path:
    """Four-page book with an embedded outline and metadata."""
    return make_pdf(
        "outlined.pdf",
        toc=[
            [1, "Chapter 1", 1],
            [2, "Transcendental Aesthetic", 2],
            [1, "Chapter 2", 4],
        ],
        metadata={"title": "Critique of Pure Reason", "author": "Immanuel Kant"},
    )


@pytest.fixture
def plain_pdf(make_pdf) -> Path:
    """Same book without an outline."""
    return make_pdf("plain.pdf")


@pytest.fixture
def raw_book() -> RawDocument:
    """In-memory raw document, no file on disk."""
    pages = [PageData(index=i, label=str(i + 1), text=text) for i, text in enumerate(BOOK_PAGES)]
    return RawDocument(
        source_path=Path("memory.pdf"),
        page_count=len(pages),
        pages=pages,
        outline=[
            OutlineEntry(level=1, title="Chapter 1", page_index=0),
            OutlineEntry(level=2, title="Transcendental Aesthetic", page_index=1),
            OutlineEntry(level=1, title="Chapter 2", page_index=3),
        ],
        metadata={},
    )


@pytest.fixture(scope="session")
def sample_config():
    """Return a LibraryConfig that never calls the ML service."""
    from pdfshelf import LibraryConfig, TocExtractionConfig

    return LibraryConfig(toc=TocExtractionConfig(use_ml_service=False))
