"""Tests for duplicate-link grouping."""

from ad_variations.links import (
    build_duplicate_groups,
    group_index,
    resolve_link,
    split_links,
)
from ad_variations.models import Ad


def _ids(groups):
    return [[ad.id for ad in g] for g in groups]


class TestSplitLinks:

    def test_separators(self):
        assert split_links("B,\nC  D,,\tE") == ["B", "C", "D", "E"]

    def test_empty(self):
        assert split_links(None) == []
        assert split_links("  , ") == []


class TestResolveLink:

    def test_priority(self):
        id_index = {5: 0}
        archive_index = {"5": 1, "777": 2}
        assert resolve_link("5", id_index, archive_index) == 0
        assert resolve_link("777", id_index, archive_index) == 2
        assert resolve_link("https://fb.com/ads/library/?id=777", id_index, archive_index) == 2
        assert resolve_link("nothing", id_index, archive_index) is None


class TestDuplicateGroups:

    def test_archive_id_link(self):
        ads = [Ad(id=1, ad_archive_id="A", duplicates_links="B"),
               Ad(id=2, ad_archive_id="B")]
        groups, related = build_duplicate_groups(ads)
        assert _ids(groups) == [[1, 2]]
        assert related == {1: 1, 2: 1}

    def test_numeric_id_link(self):
        ads = [Ad(id=10, ad_archive_id="111", duplicates_links="11"),
               Ad(id=11, ad_archive_id="222")]
        groups, related = build_duplicate_groups(ads)
        assert _ids(groups) == [[10, 11]]

    def test_string_numeric_ids(self):
        ads = [Ad(id="3", ad_archive_id="x1", duplicates_links="4"),
               Ad(id="4", ad_archive_id="x2")]
        groups, _ = build_duplicate_groups(ads)
        assert len(groups) == 1

    def test_archive_id_inside_url(self):
        ads = [Ad(id=1, ad_archive_id="111", duplicates_links=
                  "https://www.facebook.com/ads/library/?id=987654321"),
               Ad(id=2, ad_archive_id="987654321")]
        groups, _ = build_duplicate_groups(ads)
        assert _ids(groups) == [[1, 2]]

    def test_components_are_transitive(self):
        ads = [Ad(id=1, ad_archive_id="A", duplicates_links="B"),
               Ad(id=2, ad_archive_id="B"),
               Ad(id=3, ad_archive_id="C", duplicates_links="B"),
               Ad(id=4, ad_archive_id="D")]
        groups, related = build_duplicate_groups(ads)
        assert _ids(groups) == [[1, 2, 3], [4]]
        assert related == {1: 2, 2: 2, 3: 2, 4: 0}

    def test_digit_symbols_are_not_numeric_ids(self):
        ads = [Ad(id=1, ad_archive_id="A", duplicates_links="see note ², B"),
               Ad(id="²", ad_archive_id="B")]
        groups, related = build_duplicate_groups(ads)
        assert _ids(groups) == [[1, "²"]]
        assert related == {1: 1, "²": 1}
        assert resolve_link("²", {2: 0}, {}) is None

    def test_unresolved_links_leave_singletons(self):
        ads = [Ad(id=1, ad_archive_id="A", duplicates_links="Z, Y")]
        groups, related = build_duplicate_groups(ads)
        assert _ids(groups) == [[1]]
        assert related == {1: 0}

    def test_grouping_is_scoped_to_subset(self):
        a = Ad(id=1, ad_archive_id="A", duplicates_links="B")
        b = Ad(id=2, ad_archive_id="B", duplicates_links="C")
        c = Ad(id=3, ad_archive_id="C")
        full, _ = build_duplicate_groups([a, b, c])
        assert _ids(full) == [[1, 2, 3]]

        scoped, related = build_duplicate_groups([a, c])
        assert _ids(scoped) == [[1], [3]]
        assert related == {1: 0, 3: 0}

    def test_empty(self):
        assert build_duplicate_groups([]) == ([], {})


def test_group_index():
    ads = [Ad(id=1, ad_archive_id="A", duplicates_links="B"),
           Ad(id=2, ad_archive_id="B"),
           Ad(id=3, ad_archive_id="C")]
    groups, _ = build_duplicate_groups(ads)
    index = group_index(groups)
    assert index[1] is index[2]
    assert [ad.id for ad in index[3]] == [3]
