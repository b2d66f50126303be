"""
Unit tests for pdfshelf configuration.
"""

import pytest

from pdfshelf.config import (
    IndexingConfig,
    LibraryConfig,
    TocExtractionConfig,
    TocServiceConfig,
)
from pdfshelf.exceptions import ConfigurationError


class TestIndexingConfig:
    def test_defaults(self):
        config = IndexingConfig()
        assert (config.max_length, config.max_sentences, config.max_keywords) == (10_000, 50, 200)
        assert config.max_snippets == 3
        assert config.snippet_length == 200

    def test_stop_words_frozen(self):
        config = IndexingConfig(stop_words={"der", "die"})
        assert config.stop_words == frozenset({"der", "die"})

    @pytest.mark.parametrize("field", ["max_length", "max_sentences", "max_keywords"])
    def test_negative_rejected(self, field):
        with pytest.raises(ConfigurationError, match=field):
            IndexingConfig(**{field: -1})

    def test_snippet_length_rejected(self):
        with pytest.raises(ConfigurationError):
            IndexingConfig(snippet_length=0)


class TestTocServiceConfig:
    def test_defaults(self):
        config = TocServiceConfig()
        assert config.url == "http://localhost:5060"
        assert config.timeout == 120.0
        assert config.max_retries == 3
        assert config.enabled
        assert config.fast_mode

    @pytest.mark.parametrize(
        "kwargs",
        [{"url": ""}, {"timeout": 0}, {"max_retries": 0}, {"health_timeout": -1}],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigurationError):
            TocServiceConfig(**kwargs)

    def test_from_env(self):
        config = TocServiceConfig.from_env(
            {
                "PDFSHELF_TOC_SERVICE_URL": "http://huridocs:5060/",
                "PDFSHELF_TOC_SERVICE_TIMEOUT": "30",
                "PDFSHELF_TOC_MAX_RETRIES": "5",
                "PDFSHELF_TOC_SERVICE_ENABLED": "FALSE",
            }
        )
        assert config.url == "http://huridocs:5060"
        assert config.timeout == 30.0
        assert config.max_retries == 5
        assert not config.enabled

    def test_from_env_defaults(self):
        assert TocServiceConfig.from_env({}) == TocServiceConfig()

    def test_from_env_invalid_number(self):
        with pytest.raises(ConfigurationError, match="Invalid TOC service setting"):
            TocServiceConfig.from_env({"PDFSHELF_TOC_MAX_RETRIES": "many"})

    def test_from_env_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("PDFSHELF_TOC_SERVICE_URL", "http://env.test")
        assert TocServiceConfig.from_env().url == "http://env.test"


class TestTocExtractionConfig:
    def test_defaults(self):
        config = TocExtractionConfig()
        assert config.embedded_confidence == 0.75
        assert config.pattern_confidence == 0.30
        assert config.max_pattern_items == 50

    @pytest.mark.parametrize("value", [-0.1, 0.96, 1.0])
    def test_confidence_range(self, value):
        with pytest.raises(ConfigurationError):
            TocExtractionConfig(pattern_confidence=value)

    def test_max_pattern_items(self):
        with pytest.raises(ConfigurationError):
            TocExtractionConfig(max_pattern_items=0)


class TestLibraryConfig:
    @pytest.mark.parametrize("mode", ["raise", "warn", "skip"])
    def test_error_modes(self, mode):
        assert LibraryConfig(on_extraction_error=mode).on_extraction_error == mode

    def test_invalid_error_mode(self):
        with pytest.raises(ConfigurationError, match="on_extraction_error"):
            LibraryConfig(on_extraction_error="ignore")
