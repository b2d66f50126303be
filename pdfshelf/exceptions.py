"""
Exception classes for pdfshelf.

All pdfshelf exceptions inherit from PdfShelfError,
making it easy to catch all library errors.

Example:
    >>> try:
    ...     book = pdfshelf.ingest("notes.docx")
    ... except pdfshelf.UnsupportedFormatError as e:
    ...     print(f"Format not supported: {e}")
    ... except pdfshelf.PdfShelfError as e:
    ...     print(f"pdfshelf error: {e}")
"""


class PdfShelfError(Exception):
    """
    Base exception for all pdfshelf errors.

    Catch this to handle any pdfshelf-specific error.
    """

    pass


class UnsupportedFormatError(PdfShelfError):
    """
    Raised when a book's file format is not supported.

    Example:
        >>> pdfshelf.ingest("book.epub")
        UnsupportedFormatError: Format 'epub' not yet supported. Currently only PDF is supported.
    """

    pass


class ExtractionError(PdfShelfError):
    """
    Raised when reading a PDF fails.

    Only raised by ingest() when config.on_extraction_error is "raise" or "skip".
    Otherwise, extraction errors are logged as warnings.
    """

    pass


class TocServiceError(ExtractionError):
    """Raised when the ML table-of-contents service fails after all retries."""

    pass


class ConfigurationError(PdfShelfError, ValueError):
    """
    Raised for invalid configuration.

    Example:
        >>> TocServiceConfig(max_retries=0)
        ConfigurationError: max_retries must be >= 1, got 0
    """

    pass


class PageNotFoundError(PdfShelfError, LookupError):
    """Raised when a requested page is out of range or has no text."""

    pass


class SearchQueryError(PdfShelfError, ValueError):
    """Raised when a content search query is too short to run."""

    pass
