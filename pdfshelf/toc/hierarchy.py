"""
Table-of-contents hierarchy building and scoring.

TOC sources produce flat, leveled heading lists. build_hierarchy() nests
them into a forest: each heading becomes a child of the nearest earlier
heading with a strictly smaller level, or a root when there is none.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pdfshelf.models import TocNode

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from pdfshelf.models import HeadingCandidate

ML_BASE_CONFIDENCE = 0.85
MAX_ITEMS_BONUS = 0.10
ITEM_BONUS = 0.01
MULTI_LEVEL_BONUS = 0.05
PAGE_ORDER_BONUS = 0.03
MAX_CONFIDENCE = 0.95


def build_hierarchy(candidates: Iterable[HeadingCandidate]) -> list[TocNode]:
    """Nest a flat leveled heading list into a forest.

    Any level sequence is accepted. With levels 1, 3, 2 both later
    headings become children of the first: the level-3 node is closed
    before the level-2 node is placed.

    Args:
        candidates: Headings in document order.

    Returns:
        Root nodes in input order. Candidates are copied, never mutated.
    """
    roots: list[TocNode] = []
    stack: list[tuple[TocNode, int]] = []  # (open node, its level)

    for candidate in candidates:
        node = TocNode.from_candidate(candidate)

        # Close every open node at or below this level
        while stack and stack[-1][1] >= node.level:
            stack.pop()

        if stack:
            stack[-1][0].children.append(node)
        else:
            roots.append(node)

        stack.append((node, node.level))

    return roots


def iter_nodes(forest: Iterable[TocNode]) -> Iterator[TocNode]:
    """Yield nodes depth-first, each node before its children."""
    for node in forest:
        yield node
        yield from iter_nodes(node.children)


def flatten(forest: Iterable[TocNode]) -> list[TocNode]:
    """Pre-order list of every node in the forest."""
    return list(iter_nodes(forest))


def score_confidence(
    hierarchy: list[TocNode], candidates: Iterable[HeadingCandidate] | None = None
) -> float:
    """Confidence of an ML-service extraction.

    Starts at 0.85. A non-empty result earns 0.01 per root node (up to
    0.10), 0.05 for using more than one level and 0.03 when pages never
    decrease in reading order. Capped at 0.95.

    ``candidates``, the flat list the forest was built from, is accepted
    for callers that pass both and does not affect the score.
    """
    confidence = ML_BASE_CONFIDENCE

    if hierarchy:
        confidence += min(MAX_ITEMS_BONUS, len(hierarchy) * ITEM_BONUS)

        nodes = flatten(hierarchy)
        if len({node.level for node in nodes}) > 1:
            confidence += MULTI_LEVEL_BONUS

        pages = [node.page for node in nodes]
        if all(later >= earlier for earlier, later in zip(pages, pages[1:])):
            confidence += PAGE_ORDER_BONUS

    return min(MAX_CONFIDENCE, confidence)


def find_by_page(forest: Iterable[TocNode], page: int) -> TocNode | None:
    """First node, in reading order, that starts on ``page``."""
    for node in iter_nodes(forest):
        if node.page == page:
            return node
    return None


def max_level(forest: Iterable[TocNode]) -> int:
    """Deepest heading level in the forest (0 when empty)."""
    return max((node.level for node in iter_nodes(forest)), default=0)
