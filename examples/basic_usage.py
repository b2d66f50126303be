#!/usr/bin/env python3
"""
Basic pdfshelf Usage Example

This example demonstrates the core workflow:
1. Ingest a PDF into an IndexedBook
2. Inspect the extracted table of contents
3. Store the TOC as flat rows and rebuild it
4. Search ingested books
5. Read single pages
"""

import json
import logging

import pdfshelf
from pdfshelf import LibraryConfig, TocExtractionConfig, TocServiceConfig
from pdfshelf.readers import PDFReader
from pdfshelf.toc import flatten, from_records, to_records
from pdfshelf.toc.sources import MLServiceSource


def main():
    logging.basicConfig(level=logging.INFO)

    # ─────────────────────────────────────────────────────────────────────────
    # 1. Ingest
    # ─────────────────────────────────────────────────────────────────────────

    # The ML layout service is used when reachable; set
    # PDFSHELF_TOC_SERVICE_ENABLED=false to skip it
    service = TocServiceConfig.from_env()
    if service.enabled and not MLServiceSource(service).is_healthy():
        print(f"TOC service at {service.url} is not reachable, using fallbacks")
        service = TocServiceConfig(url=service.url, enabled=False)

    config = LibraryConfig(toc=TocExtractionConfig(service=service))
    book = pdfshelf.ingest("path/to/book.pdf", config)

    print(f"Ingested: {book.metadata.title} by {book.metadata.author}")
    print(f"  Pages: {book.metadata.page_count}")
    print(f"  Searchable text: {len(book.searchable_text):,} characters")
    for warning in book.warnings:
        print(f"  Warning: {warning}")

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Table of Contents
    # ─────────────────────────────────────────────────────────────────────────

    toc = book.toc
    print(f"TOC via {toc.method.value} (confidence {toc.confidence:.2f})")
    for node in flatten(toc.items):
        print(f"{'  ' * (node.level - 1)}{node.title} ... {node.page}")

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Storage Rows
    # ─────────────────────────────────────────────────────────────────────────

    records = to_records(toc.items)
    assert from_records(records) == toc.items
    print(json.dumps(toc.to_dict(), indent=2)[:500])

    # ─────────────────────────────────────────────────────────────────────────
    # 4. Search
    # ─────────────────────────────────────────────────────────────────────────

    for hit in pdfshelf.search_books([book], "pure reason"):
        print(f"Match in {hit.book.source_path.name}:")
        for snippet in hit.snippets:
            print(f"  {snippet}")

    # ─────────────────────────────────────────────────────────────────────────
    # 5. Page Text
    # ─────────────────────────────────────────────────────────────────────────

    raw = PDFReader().read(book.source_path)
    try:
        print(raw.page_text(1)[:200])
    except pdfshelf.PageNotFoundError as e:
        print(f"No text: {e}")


if __name__ == "__main__":
    main()
