"""
Unit tests for the cascading TOC extractor.
"""

from datetime import datetime

import httpx
import pytest

from pdfshelf.config import TocExtractionConfig, TocServiceConfig
from pdfshelf.models import ExtractionMethod, HeadingCandidate
from pdfshelf.toc import TocExtractor, extract_toc, score_confidence
from pdfshelf.toc.sources import MLServiceSource, TocSource


class StaticSource(TocSource):
    """Source returning fixed candidates."""

    name = "static"

    def __init__(self, *candidates: HeadingCandidate):
        self.candidates = list(candidates)
        self.calls = 0

    def extract(self, doc):
        self.calls += 1
        return list(self.candidates)


class FailingSource(TocSource):
    """Source that always raises."""

    name = "failing"

    def extract(self, doc):
        raise RuntimeError("service down")


ML_HEADINGS = (
    HeadingCandidate(title="Introduction", page=1, level=1),
    HeadingCandidate(title="Scope", page=2, level=2),
)


class TestCascade:
    """Test strategy order and fallback."""

    def test_ml_service_first(self, raw_book):
        outline = StaticSource()
        result = TocExtractor(
            ml_source=StaticSource(*ML_HEADINGS), outline_source=outline
        ).extract(raw_book)

        assert result.method is ExtractionMethod.ML_SERVICE
        assert result.confidence == score_confidence(result.items)
        assert [n.title for n in result.items] == ["Introduction"]
        assert result.items[0].children[0].title == "Scope"
        assert outline.calls == 0

    def test_ml_failure_falls_back_to_outline(self, raw_book):
        result = TocExtractor(ml_source=FailingSource()).extract(raw_book)

        assert result.method is ExtractionMethod.EMBEDDED
        assert result.confidence == 0.75
        assert [n.title for n in result.items] == ["Chapter 1", "Chapter 2"]
        assert result.items[0].children[0].title == "Transcendental Aesthetic"
        assert any("failing failed: service down" in line for line in result.processing_log)

    def test_empty_ml_falls_back(self, raw_book):
        result = TocExtractor(ml_source=StaticSource()).extract(raw_book)
        assert result.method is ExtractionMethod.EMBEDDED

    def test_pattern_last(self, raw_book):
        raw_book.outline = []
        result = TocExtractor(ml_source=StaticSource()).extract(raw_book)

        assert result.method is ExtractionMethod.PATTERN
        assert result.confidence == 0.30
        assert [n.title for n in result.items] == ["Chapter 1", "Chapter 2"]
        assert result.items[0].children[0].title == "1.1 Transcendental Aesthetic"

    def test_nothing_found(self, raw_book):
        result = TocExtractor(
            ml_source=StaticSource(),
            outline_source=StaticSource(),
            pattern_source=StaticSource(),
        ).extract(raw_book)

        assert result.items == []
        assert result.confidence == 0.0
        assert result.method is ExtractionMethod.PATTERN
        assert "All TOC extraction methods found nothing" in result.processing_log

    def test_result_metadata(self, raw_book):
        result = TocExtractor(ml_source=StaticSource(*ML_HEADINGS)).extract(raw_book)
        assert isinstance(result.extracted_at, datetime)
        assert result.processing_time_ms >= 0

    def test_custom_confidences(self, raw_book):
        config = TocExtractionConfig(use_ml_service=False, embedded_confidence=0.6)
        assert TocExtractor(config).extract(raw_book).confidence == 0.6


class TestConfiguration:
    """Test strategy switches."""

    def test_ml_disabled(self):
        extractor = TocExtractor(TocExtractionConfig(use_ml_service=False))
        assert extractor.ml_source is None

    def test_service_disabled(self):
        config = TocExtractionConfig(service=TocServiceConfig(enabled=False))
        extractor = TocExtractor(config, ml_source=StaticSource(*ML_HEADINGS))
        assert extractor.ml_source is None

    def test_default_sources(self):
        extractor = TocExtractor(TocExtractionConfig(max_pattern_items=7))
        assert isinstance(extractor.ml_source, MLServiceSource)
        assert extractor.pattern_source.max_items == 7

    def test_all_disabled(self, raw_book):
        config = TocExtractionConfig(
            use_ml_service=False, use_embedded_outline=False, use_pattern_detection=False
        )
        result = TocExtractor(config).extract(raw_book)
        assert result.items == []
        assert result.confidence == 0.0

    def test_extract_toc_helper(self, raw_book):
        result = extract_toc(raw_book, TocExtractionConfig(use_ml_service=False))
        assert result.method is ExtractionMethod.EMBEDDED


class TestWithServiceSource:
    """Cascade with the real service source over a mock transport."""

    def test_unreachable_service_falls_back(self, tmp_path, raw_book):
        raw_book.source_path = tmp_path / "book.pdf"
        raw_book.source_path.write_bytes(b"%PDF-1.4 fake")

        def handler(request):
            raise httpx.ConnectError("connection refused")

        delays = []
        ml = MLServiceSource(
            TocServiceConfig(url="http://toc.test"),
            client=httpx.Client(transport=httpx.MockTransport(handler)),
            sleep=delays.append,
        )
        result = TocExtractor(ml_source=ml).extract(raw_book)

        assert result.method is ExtractionMethod.EMBEDDED
        assert delays == [2, 4]

    def test_service_result_used(self, tmp_path, raw_book):
        raw_book.source_path = tmp_path / "book.pdf"
        raw_book.source_path.write_bytes(b"%PDF-1.4 fake")

        def handler(request):
            return httpx.Response(
                200,
                json=[
                    {"label": "Preface", "indentation": 0, "bounding_box": {"page": "1"}},
                    {"label": "Aims", "indentation": 1, "bounding_box": {"page": "2"}},
                    {"label": "Method", "indentation": 0, "bounding_box": {"page": "4"}},
                ],
            )

        ml = MLServiceSource(
            TocServiceConfig(url="http://toc.test"),
            client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
        result = TocExtractor(ml_source=ml).extract(raw_book)

        assert result.method is ExtractionMethod.ML_SERVICE
        # 2 roots, 2 levels, ordered pages
        assert result.confidence == pytest.approx(0.85 + 0.02 + 0.05 + 0.03)
