"""
Tests for the record grouping helpers.
"""

from grouping import day_key, dispatch_key, group_by
from tests.conftest import make_record


def _records():
    return [
        make_record(id=1, date="2026-02-16", user="A"),
        make_record(id=2, date="2026-02-15", user="B"),
        make_record(id=3, date="2026-02-16", user="A"),
        make_record(id=4, date="2026-02-16", user="B"),
        make_record(id=5, date="2026-02-15", user="B"),
    ]


class TestGroupBy:
    def test_empty_input(self):
        assert group_by([], day_key) == []

    def test_groups_in_first_appearance_order(self):
        keys = [key for key, _ in group_by(_records(), dispatch_key)]
        assert keys == [("2026-02-16", "A"), ("2026-02-15", "B"), ("2026-02-16", "B")]

    def test_within_group_order_is_input_order(self):
        groups = dict(group_by(_records(), dispatch_key))
        assert [r.id for r in groups[("2026-02-16", "A")]] == [1, 3]
        assert [r.id for r in groups[("2026-02-15", "B")]] == [2, 5]

    def test_partition_is_exact(self):
        records = _records()
        groups = group_by(records, day_key)
        ids = sorted(r.id for _, items in groups for r in items)
        assert ids == [r.id for r in records]

    def test_day_key_ignores_driver(self):
        groups = group_by(_records(), day_key)
        assert [key for key, _ in groups] == ["2026-02-16", "2026-02-15"]
        assert [r.id for r in groups[0][1]] == [1, 3, 4]

    def test_keys_are_not_sorted(self):
        records = [make_record(id=1, date="2026-03-02"), make_record(id=2, date="2026-03-01")]
        assert [key for key, _ in group_by(records, day_key)] == ["2026-03-02", "2026-03-01"]
