"""Tests for representative selection and ordering."""

from ad_variations.models import Ad
from ad_variations.ranking import (
    SORT_ALIASES,
    pick_representative,
    resolve_sort,
    sort_groups,
    sort_representatives,
)


class TestPickRepresentative:

    def test_newest_wins(self):
        group = [Ad(id=1, created_at="2024-01-01T00:00:00Z"),
                 Ad(id=2, created_at="2024-03-01T00:00:00+00:00"),
                 Ad(id=3, created_at="2024-02-01T00:00:00Z")]
        assert pick_representative(group).id == 2

    def test_missing_timestamp_loses(self):
        group = [Ad(id=1), Ad(id=2, created_at="2023-05-05T10:00:00"), Ad(id=3, created_at="garbage")]
        assert pick_representative(group).id == 2

    def test_singleton_and_empty(self):
        only = Ad(id=9)
        assert pick_representative([only]) is only
        assert pick_representative([]) is None


class TestSortRepresentatives:

    def setup_method(self):
        self.reps = [Ad(id=1, created_at="2024-01-01T00:00:00Z"),
                     Ad(id=2, created_at="2024-01-03T00:00:00Z"),
                     Ad(id=3, created_at="2024-01-02T00:00:00Z")]
        self.related = {1: 3, 2: 1, 3: 2}

    def _counts(self, mode):
        return [self.related[ad.id] for ad in sort_representatives(self.reps, self.related, mode)]

    def test_most_and_least(self):
        assert self._counts("most_variations") == [3, 2, 1]
        assert self._counts("least_variations") == [1, 2, 3]

    def test_auto_and_unknown_mean_most(self):
        assert self._counts("auto") == [3, 2, 1]
        assert self._counts(None) == [3, 2, 1]
        assert self._counts("sideways") == [3, 2, 1]

    def test_newest(self):
        order = sort_representatives(self.reps, self.related, "newest")
        assert [ad.id for ad in order] == [2, 3, 1]

    def test_ties_broken_by_newest(self):
        related = {1: 2, 2: 2, 3: 2}
        for mode in ("most_variations", "least_variations"):
            order = sort_representatives(self.reps, related, mode)
            assert [ad.id for ad in order] == [2, 3, 1]


def test_auto_is_an_alias():
    assert SORT_ALIASES["auto"] == "most_variations"
    assert resolve_sort("auto") == "most_variations"
    assert resolve_sort("newest") == "newest"
    assert resolve_sort("sideways") == "most_variations"


def test_sort_groups_counts_come_from_groups():
    big = [Ad(), Ad(), Ad()]
    small = [Ad(created_at="2024-06-01T00:00:00Z")]
    pairs = [(small[0], small), (big[0], big)]
    assert [len(g) for _, g in sort_groups(pairs, "auto")] == [3, 1]
    assert [len(g) for _, g in sort_groups(pairs, "least_variations")] == [1, 3]
    assert [len(g) for _, g in sort_groups(pairs, "newest")] == [1, 3]
