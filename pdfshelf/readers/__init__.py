"""PDF reading module (PyMuPDF)."""

from pdfshelf.readers.pdf_reader import (
    OutlineEntry,
    PageData,
    PDFReader,
    RawDocument,
)

__all__ = [
    "PDFReader",
    "RawDocument",
    "PageData",
    "OutlineEntry",
]
