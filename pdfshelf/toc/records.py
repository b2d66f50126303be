"""
Flat storage rows for a table of contents.

Persistence layers store outlines as one row per heading with a parent
reference and a sibling order. to_records() and from_records() convert
between that form and the nested TocNode forest.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass

from pdfshelf.models import TocNode


@dataclass(frozen=True)
class TocRecord:
    """One stored heading."""

    id: str
    title: str
    page: int
    level: int
    parent_id: str | None  # None for root headings
    order: int  # Position among siblings


def _new_id() -> str:
    return str(uuid.uuid4())


def to_records(
    forest: list[TocNode],
    id_factory: Callable[[], str] = _new_id,
) -> list[TocRecord]:
    """Flatten a forest into rows, parents before their children.

    Args:
        forest: Root nodes.
        id_factory: Generates row ids (random UUIDs by default).
    """
    records: list[TocRecord] = []

    def visit(nodes: list[TocNode], parent_id: str | None) -> None:
        for order, node in enumerate(nodes):
            record = TocRecord(
                id=id_factory(),
                title=node.title,
                page=node.page,
                level=node.level,
                parent_id=parent_id,
                order=order,
            )
            records.append(record)
            if node.children:
                visit(node.children, record.id)

    visit(forest, None)
    return records


def from_records(records: list[TocRecord]) -> list[TocNode]:
    """Rebuild the nested forest from stored rows.

    Siblings are sorted by ``order``. Rows pointing at an unknown
    parent are dropped.
    """
    nodes = {
        record.id: TocNode(title=record.title, page=record.page, level=record.level)
        for record in records
    }
    orders = {record.id: record.order for record in records}

    root_ids: list[str] = []
    child_ids: dict[str, list[str]] = {}

    for record in records:
        if record.parent_id is None:
            root_ids.append(record.id)
        elif record.parent_id in nodes:
            child_ids.setdefault(record.parent_id, []).append(record.id)

    for parent_id, ids in child_ids.items():
        ids.sort(key=lambda i: orders[i])
        nodes[parent_id].children = [nodes[i] for i in ids]

    root_ids.sort(key=lambda i: orders[i])
    return [nodes[i] for i in root_ids]
