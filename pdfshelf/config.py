"""
Configuration for pdfshelf ingestion, indexing and TOC extraction.

All options have defaults suitable for a personal library back end.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

from pdfshelf.exceptions import ConfigurationError
from pdfshelf.indexing.stopwords import DEFAULT_STOP_WORDS


@dataclass(frozen=True)
class IndexingConfig:
    """
    Limits for the searchable index text and search snippets.

    Example:
        >>> config = IndexingConfig(max_length=5000, stop_words=frozenset({"der", "die"}))
        >>> indexer = TextIndexer(config)
    """

    max_length: int = 10_000  # Hard cap on the condensed text
    max_sentences: int = 50
    max_keywords: int = 200
    max_snippets: int = 3
    snippet_length: int = 200
    stop_words: frozenset[str] = DEFAULT_STOP_WORDS

    def __post_init__(self):
        """Validate configuration."""
        for name in ("max_length", "max_sentences", "max_keywords", "max_snippets"):
            value = getattr(self, name)
            if value < 0:
                raise ConfigurationError(f"{name} must be >= 0, got {value}")
        if self.snippet_length < 1:
            raise ConfigurationError(f"snippet_length must be >= 1, got {self.snippet_length}")
        if not isinstance(self.stop_words, frozenset):
            # Keep the configured set immutable
            object.__setattr__(self, "stop_words", frozenset(self.stop_words))


@dataclass(frozen=True)
class TocServiceConfig:
    """
    Connection settings for the ML table-of-contents service.

    Example:
        >>> config = TocServiceConfig.from_env()
        >>> config.url
        'http://localhost:5060'
    """

    url: str = "http://localhost:5060"
    timeout: float = 120.0  # Seconds per attempt
    max_retries: int = 3
    enabled: bool = True
    fast_mode: bool = True
    health_timeout: float = 5.0

    def __post_init__(self):
        """Validate configuration."""
        if not self.url:
            raise ConfigurationError("url must not be empty")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be > 0, got {self.timeout}")
        if self.max_retries < 1:
            raise ConfigurationError(f"max_retries must be >= 1, got {self.max_retries}")
        if self.health_timeout <= 0:
            raise ConfigurationError(f"health_timeout must be > 0, got {self.health_timeout}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TocServiceConfig:
        """Build a config from PDFSHELF_TOC_* environment variables.

        Unset variables keep their defaults.

        Args:
            environ: Mapping to read instead of os.environ.

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        try:
            timeout = float(env.get("PDFSHELF_TOC_SERVICE_TIMEOUT", defaults.timeout))
            max_retries = int(env.get("PDFSHELF_TOC_MAX_RETRIES", defaults.max_retries))
        except ValueError as e:
            raise ConfigurationError(f"Invalid TOC service setting: {e}") from e

        enabled_raw = env.get("PDFSHELF_TOC_SERVICE_ENABLED", "true")
        return cls(
            url=env.get("PDFSHELF_TOC_SERVICE_URL", defaults.url).rstrip("/"),
            timeout=timeout,
            max_retries=max_retries,
            enabled=enabled_raw.strip().lower() != "false",
        )


@dataclass(frozen=True)
class TocExtractionConfig:
    """
    Which TOC strategies to try, and the fixed confidences of the fallbacks.

    Strategies are always tried in the same order: ML service,
    embedded outline, pattern headings.
    """

    use_ml_service: bool = True
    use_embedded_outline: bool = True
    use_pattern_detection: bool = True
    embedded_confidence: float = 0.75
    pattern_confidence: float = 0.30
    max_pattern_items: int = 50
    service: TocServiceConfig = field(default_factory=TocServiceConfig)

    def __post_init__(self):
        """Validate configuration."""
        for name in ("embedded_confidence", "pattern_confidence"):
            value = getattr(self, name)
            if value < 0.0 or value > 0.95:
                raise ConfigurationError(f"{name} must be between 0.0 and 0.95, got {value}")
        if self.max_pattern_items < 1:
            raise ConfigurationError(
                f"max_pattern_items must be >= 1, got {self.max_pattern_items}"
            )


@dataclass
class LibraryConfig:
    """
    Configuration for ingesting books into the library.

    Example:
        >>> config = LibraryConfig(
        ...     toc=TocExtractionConfig(use_ml_service=False),
        ...     on_extraction_error="raise",
        ... )
        >>> book = pdfshelf.ingest("book.pdf", config)
    """

    indexing: IndexingConfig = field(default_factory=IndexingConfig)
    toc: TocExtractionConfig = field(default_factory=TocExtractionConfig)

    # Error handling
    on_extraction_error: Literal["raise", "warn", "skip"] = "warn"

    def __post_init__(self):
        """Validate configuration."""
        valid_error_modes = ("raise", "warn", "skip")
        if self.on_extraction_error not in valid_error_modes:
            raise ConfigurationError(
                f"on_extraction_error must be one of {valid_error_modes}, "
                f"got {self.on_extraction_error!r}"
            )
