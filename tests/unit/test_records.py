"""
Unit tests for flat TOC storage rows.
"""

import itertools
import random

from pdfshelf.models import HeadingCandidate
from pdfshelf.toc import TocRecord, build_hierarchy, from_records, to_records


def counter_ids():
    counter = itertools.count(1)
    return lambda: str(next(counter))


def sample_forest():
    return build_hierarchy(
        [
            HeadingCandidate(title="Part One", page=1, level=1),
            HeadingCandidate(title="Chapter 1", page=2, level=2),
            HeadingCandidate(title="Chapter 2", page=9, level=2),
            HeadingCandidate(title="Part Two", page=20, level=1),
        ]
    )


class TestToRecords:
    """Test flattening a forest into rows."""

    def test_parent_links_and_order(self):
        records = to_records(sample_forest(), id_factory=counter_ids())
        assert [(r.id, r.title, r.parent_id, r.order) for r in records] == [
            ("1", "Part One", None, 0),
            ("2", "Chapter 1", "1", 0),
            ("3", "Chapter 2", "1", 1),
            ("4", "Part Two", None, 1),
        ]

    def test_default_ids_unique(self):
        records = to_records(sample_forest())
        assert len({r.id for r in records}) == 4

    def test_empty(self):
        assert to_records([]) == []


class TestFromRecords:
    """Test rebuilding a forest from rows."""

    def test_round_trip(self):
        forest = sample_forest()
        assert from_records(to_records(forest)) == forest

    def test_row_order_does_not_matter(self):
        forest = sample_forest()
        records = to_records(forest)
        random.Random(7).shuffle(records)
        assert from_records(records) == forest

    def test_orphans_dropped(self):
        records = [
            TocRecord(id="a", title="Root", page=1, level=1, parent_id=None, order=0),
            TocRecord(id="b", title="Lost", page=2, level=2, parent_id="missing", order=0),
        ]
        forest = from_records(records)
        assert [n.title for n in forest] == ["Root"]
        assert forest[0].children == []
