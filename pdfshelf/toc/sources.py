"""
Table-of-contents sources.

Each source proposes flat heading candidates from different evidence:
- MLServiceSource: external layout-analysis service (highest accuracy)
- EmbeddedOutlineSource: PDF bookmarks
- PatternHeadingSource: regex heuristics over page text (always available)

Sources return an empty list when they find nothing. Only the ML service
source raises, when the service stays unreachable after its retries.
"""

from __future__ import annotations

import logging
import re
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from contextlib import nullcontext
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from pdfshelf.config import TocServiceConfig
from pdfshelf.exceptions import TocServiceError
from pdfshelf.models import HeadingCandidate

if TYPE_CHECKING:
    from pdfshelf.readers.pdf_reader import RawDocument

logger = logging.getLogger(__name__)

MIN_LEVEL = 1
MAX_LEVEL = 6
MAX_TITLE_LENGTH = 500


def clamp_level(level: int) -> int:
    """Clamp a heading level into 1..6."""
    return max(MIN_LEVEL, min(level, MAX_LEVEL))


class TocSource(ABC):
    """Abstract base for table-of-contents sources."""

    name: str = "base"

    @abstractmethod
    def extract(self, doc: RawDocument) -> list[HeadingCandidate]:
        """Extract heading candidates from document, in reading order.

        Should return empty list if source can't detect anything
        (graceful degradation).
        """
        pass


class MLServiceSource(TocSource):
    """Ask the ML layout service for the document's table of contents.

    The service receives the PDF as a multipart upload on ``POST /toc`` and
    answers with a JSON list of ``{"label", "indentation", "bounding_box"}``
    items. Failed calls are retried with exponential backoff
    (2, 4, ... seconds).
    """

    name = "ml_service"

    def __init__(
        self,
        config: TocServiceConfig | None = None,
        *,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the service source.

        Args:
            config: Service URL, timeout and retry settings.
            client: HTTP client to reuse; a short-lived one is opened per
                call when omitted.
            sleep: Called with the backoff delay in seconds between attempts.
        """
        self.config = config or TocServiceConfig()
        self._client = client
        self._sleep = sleep

    @property
    def toc_url(self) -> str:
        return f"{self.config.url.rstrip('/')}/toc"

    @property
    def health_url(self) -> str:
        return f"{self.config.url.rstrip('/')}/health"

    def extract(self, doc: RawDocument) -> list[HeadingCandidate]:
        """Upload the document and convert the service's answer.

        Raises:
            FileNotFoundError: If the source PDF no longer exists.
            TocServiceError: If every attempt failed.
        """
        path = Path(doc.source_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        logger.info(
            "Requesting TOC from %s for %s (fast: %s)", self.toc_url, path, self.config.fast_mode
        )
        items = self._call_with_retry(path)
        return self.to_candidates(items)

    def _open_client(self):
        if self._client is not None:
            return nullcontext(self._client)
        return httpx.Client(timeout=self.config.timeout)

    def _call_with_retry(self, path: Path) -> list[Any]:
        max_retries = self.config.max_retries
        last_error: Exception | None = None

        for attempt in range(1, max_retries + 1):
            try:
                logger.debug(f"TOC service call attempt {attempt}/{max_retries}")
                return self._post_document(path)
            except (httpx.HTTPError, TocServiceError, ValueError) as e:
                last_error = e
                logger.warning(f"TOC service attempt {attempt} failed: {e}")

                if attempt < max_retries:
                    delay = 2**attempt
                    logger.debug(f"Waiting {delay}s before retry...")
                    self._sleep(delay)

        raise TocServiceError(
            f"TOC service failed after {max_retries} attempts: {last_error}"
        ) from last_error

    def _post_document(self, path: Path) -> list[Any]:
        data = {"fast": "true"} if self.config.fast_mode else {}

        with self._open_client() as client, path.open("rb") as fh:
            response = client.post(
                self.toc_url,
                files={"file": (path.name, fh, "application/pdf")},
                data=data,
                headers={"Accept": "application/json"},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            payload = response.json()

        if not isinstance(payload, list):
            raise TocServiceError("Invalid response format from TOC service")
        return payload

    def to_candidates(self, items: list[Any]) -> list[HeadingCandidate]:
        """Convert service items, dropping empty, oversized or pageless ones."""
        candidates = []
        for item in items:
            if not isinstance(item, dict):
                continue

            title = str(item.get("label") or "").strip()
            level = clamp_level(self._indentation(item) + 1)
            page = self._page_from_bounding_box(item.get("bounding_box"))

            if title and page > 0 and len(title) < MAX_TITLE_LENGTH:
                candidates.append(HeadingCandidate(title=title, page=page, level=level))

        return candidates

    @staticmethod
    def _indentation(item: dict[str, Any]) -> int:
        try:
            return int(item.get("indentation") or 0)
        except (TypeError, ValueError):
            return 0

    @staticmethod
    def _page_from_bounding_box(bounding_box: Any) -> int:
        """Page number from a bounding box; the service sends it as a string."""
        if not isinstance(bounding_box, dict):
            return 1

        # Leading integer only, like "12" or "12.0"
        match = re.match(r"\s*(-?\d+)", str(bounding_box.get("page", "")))
        if not match:
            return 1
        return max(1, int(match.group(1)))

    def is_healthy(self) -> bool:
        """Whether the service answers its health check with 200."""
        try:
            with self._open_client() as client:
                response = client.get(self.health_url, timeout=self.config.health_timeout)
        except httpx.HTTPError as e:
            logger.warning("TOC service health check failed: %s", e)
            return False
        return response.status_code == 200

    def service_info(self) -> dict[str, Any]:
        """Current service settings, for status endpoints."""
        return {
            "url": self.config.url,
            "timeout": self.config.timeout,
            "max_retries": self.config.max_retries,
            "enabled": self.config.enabled,
        }


class EmbeddedOutlineSource(TocSource):
    """Read headings from the PDF outline/bookmarks.

    PyMuPDF returns the outline already flattened with levels, so the
    entries map one-to-one onto candidates.
    """

    name = "embedded_outline"

    def extract(self, doc: RawDocument) -> list[HeadingCandidate]:
        """Extract candidates from PDF outline."""
        if not doc.outline:
            return []  # Graceful degradation

        return [
            HeadingCandidate(
                title=entry.title or "Untitled",
                page=entry.page_index + 1,
                level=clamp_level(entry.level),
            )
            for entry in doc.outline
        ]


# (pattern, level) in priority order; group 1 is the title
HEADING_PATTERNS: tuple[tuple[re.Pattern[str], int], ...] = (
    # Chapters
    (re.compile(r"^(Chapter \d+|CHAPTER \d+)", re.MULTILINE), 1),
    (re.compile(r"^(Chapter [IVXLCDM]+)\b", re.MULTILINE), 1),
    # Numbered sections
    (re.compile(r"^(\d+\.[ \t]*[A-Z][A-Za-z \t]*)", re.MULTILINE), 1),
    (re.compile(r"^(\d+\.\d+[ \t]*[A-Z][A-Za-z \t]*)", re.MULTILINE), 2),
    (re.compile(r"^(\d+\.\d+\.\d+[ \t]*[A-Z][A-Za-z \t]*)", re.MULTILINE), 3),
    # ALL CAPS lines
    (re.compile(r"^([A-Z][A-Z \t]{4,}[A-Z])$", re.MULTILINE), 1),
    # Common section names
    (re.compile(r"^(Introduction|INTRODUCTION)", re.MULTILINE), 1),
    (re.compile(r"^(Conclusion|CONCLUSION)", re.MULTILINE), 1),
    (re.compile(r"^(Abstract|ABSTRACT)", re.MULTILINE), 1),
    (re.compile(r"^(References|REFERENCES)", re.MULTILINE), 1),
    (re.compile(r"^(Bibliography|BIBLIOGRAPHY)", re.MULTILINE), 1),
    (re.compile(r"^(Appendix|APPENDIX)", re.MULTILINE), 1),
)


class PatternHeadingSource(TocSource):
    """Guess headings from page text with regex heuristics.

    Each pattern contributes at most its first match per page. Low
    precision, so this is the last resort.
    """

    name = "pattern"

    def __init__(self, max_items: int = 50):
        """Initialize pattern detector.

        Args:
            max_items: Maximum number of headings to return.
        """
        self.max_items = max_items

    def extract(self, doc: RawDocument) -> list[HeadingCandidate]:
        """Detect headings page by page."""
        candidates: list[HeadingCandidate] = []
        seen_titles: set[str] = set()

        for page in doc.pages:
            if not page.text:
                continue

            for pattern, level in HEADING_PATTERNS:
                match = pattern.search(page.text)
                if not match:
                    continue

                title = match.group(1).strip()
                # Avoid duplicates and very short titles
                if len(title) <= 2 or title in seen_titles:
                    continue

                seen_titles.add(title)
                candidates.append(
                    HeadingCandidate(title=title, page=page.page_number, level=level)
                )
                if len(candidates) >= self.max_items:
                    return candidates

        return candidates
