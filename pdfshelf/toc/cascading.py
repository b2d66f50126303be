"""
Cascading table-of-contents extractor.

Tries the strategies in a fixed order and keeps the first non-empty one:
1. ML layout service (0.85-0.95 confidence, scored per result)
2. Embedded PDF outline (0.75 confidence)
3. Pattern headings (0.30 confidence)

Results are never merged across strategies. When nothing is found the
result is empty with confidence 0.0 and method "pattern".
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from pdfshelf.config import TocExtractionConfig
from pdfshelf.models import ExtractionMethod, TocExtractionResult
from pdfshelf.toc.hierarchy import build_hierarchy, flatten, score_confidence
from pdfshelf.toc.sources import (
    EmbeddedOutlineSource,
    MLServiceSource,
    PatternHeadingSource,
    TocSource,
)

if TYPE_CHECKING:
    from pdfshelf.models import HeadingCandidate, TocNode
    from pdfshelf.readers.pdf_reader import RawDocument

logger = logging.getLogger(__name__)


class TocExtractor:
    """Orchestrates TOC extraction with cascading fallback.

    Usage:
        extractor = TocExtractor()
        result = extractor.extract(raw_document)
        print(result.method, result.confidence)
        for node in result.items:
            print(node.title, node.page)

    Custom sources:
        extractor = TocExtractor(ml_source=MLServiceSource(config, client=client))
    """

    def __init__(
        self,
        config: TocExtractionConfig | None = None,
        *,
        ml_source: MLServiceSource | None = None,
        outline_source: EmbeddedOutlineSource | None = None,
        pattern_source: PatternHeadingSource | None = None,
    ):
        """Initialize the extractor.

        Args:
            config: Strategy switches and fixed confidences.
            ml_source: ML service source (default built from config.service).
            outline_source: Embedded outline source (default creates one).
            pattern_source: Pattern source (default uses config.max_pattern_items).
        """
        self.config = config or TocExtractionConfig()

        use_ml = self.config.use_ml_service and self.config.service.enabled
        self.ml_source = (ml_source or MLServiceSource(self.config.service)) if use_ml else None
        self.outline_source = (
            (outline_source or EmbeddedOutlineSource())
            if self.config.use_embedded_outline
            else None
        )
        self.pattern_source = (
            (pattern_source or PatternHeadingSource(max_items=self.config.max_pattern_items))
            if self.config.use_pattern_detection
            else None
        )

    def extract(self, doc: RawDocument) -> TocExtractionResult:
        """Extract the table of contents using the cascade.

        Args:
            doc: Raw document from PDF reader.

        Returns:
            TocExtractionResult from the first strategy that found headings.
        """
        started = time.perf_counter()
        log: list[str] = []

        # Step 1: ML service
        candidates = self._extract_safely(self.ml_source, doc, log)
        if candidates:
            hierarchy = build_hierarchy(candidates)
            confidence = score_confidence(hierarchy, candidates)
            return self._result(
                candidates, hierarchy, confidence, ExtractionMethod.ML_SERVICE, started, log
            )
        if self.ml_source is not None:
            log.append("ML service found no headings, falling back to embedded outline")

        # Step 2: Embedded outline
        candidates = self._extract_safely(self.outline_source, doc, log)
        if candidates:
            hierarchy = build_hierarchy(candidates)
            confidence = self.config.embedded_confidence
            return self._result(
                candidates, hierarchy, confidence, ExtractionMethod.EMBEDDED, started, log
            )
        if self.outline_source is not None:
            log.append("No embedded outline, falling back to pattern headings")

        # Step 3: Pattern headings
        candidates = self._extract_safely(self.pattern_source, doc, log)
        if candidates:
            hierarchy = build_hierarchy(candidates)
            confidence = self.config.pattern_confidence
            return self._result(
                candidates, hierarchy, confidence, ExtractionMethod.PATTERN, started, log
            )

        log.append("All TOC extraction methods found nothing")
        logger.warning("No table of contents found for %s", doc.source_path)
        return TocExtractionResult.failed(_elapsed_ms(started), log)

    def _extract_safely(
        self,
        source: TocSource | None,
        doc: RawDocument,
        log: list[str],
    ) -> list[HeadingCandidate]:
        """Extract candidates with error handling."""
        if source is None:
            return []
        try:
            return source.extract(doc)
        except Exception as e:
            log.append(f"Source {source.name} failed: {e}")
            logger.warning(f"Source {source.name} failed: {e}")
            return []

    def _result(
        self,
        candidates: list[HeadingCandidate],
        hierarchy: list[TocNode],
        confidence: float,
        method: ExtractionMethod,
        started: float,
        log: list[str],
    ) -> TocExtractionResult:
        elapsed = _elapsed_ms(started)
        log.append(
            f"Found {len(candidates)} headings ({len(hierarchy)} top-level) "
            f"via {method.value} (conf={confidence:.2f})"
        )
        logger.info(
            "TOC extraction completed: %d items via %s, confidence %.2f, time %dms",
            len(flatten(hierarchy)),
            method.value,
            confidence,
            elapsed,
        )
        return TocExtractionResult(
            items=hierarchy,
            confidence=confidence,
            method=method,
            processing_time_ms=elapsed,
            processing_log=log,
        )


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def extract_toc(
    doc: RawDocument,
    config: TocExtractionConfig | None = None,
) -> TocExtractionResult:
    """Convenience function for TOC extraction.

    Args:
        doc: Raw document from PDF reader.
        config: Strategy configuration.

    Returns:
        The extraction result.
    """
    return TocExtractor(config).extract(doc)
