"""
Table-of-contents extraction module.

Implements a three-step cascade, first non-empty result wins:
- Primary: ML layout service (scored 0.85-0.95)
- Secondary: Embedded PDF outline (0.75 confidence)
- Fallback: Pattern headings from page text (0.30 confidence)

Flat heading lists are nested with build_hierarchy(); to_records() and
from_records() convert outlines to and from flat storage rows.
"""

from pdfshelf.toc.cascading import TocExtractor, extract_toc
from pdfshelf.toc.hierarchy import (
    build_hierarchy,
    find_by_page,
    flatten,
    iter_nodes,
    max_level,
    score_confidence,
)
from pdfshelf.toc.records import TocRecord, from_records, to_records
from pdfshelf.toc.sources import (
    HEADING_PATTERNS,
    EmbeddedOutlineSource,
    MLServiceSource,
    PatternHeadingSource,
    TocSource,
)

__all__ = [
    # Main extractor
    "TocExtractor",
    "extract_toc",
    # Hierarchy
    "build_hierarchy",
    "flatten",
    "iter_nodes",
    "score_confidence",
    "find_by_page",
    "max_level",
    # Storage rows
    "TocRecord",
    "to_records",
    "from_records",
    # Sources
    "TocSource",
    "MLServiceSource",
    "EmbeddedOutlineSource",
    "PatternHeadingSource",
    "HEADING_PATTERNS",
]
