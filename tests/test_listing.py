"""Unit tests for usm.domain.listing — filtering and sorting the entry list."""

from pathlib import Path

import pytest

from usm.desktop.document import Document
from usm.domain.listing import apply_filter, sort_indices, visible_indices
from usm.models import Entry, FilterConfig, SortOrder, Source


def _entry(name: str, enabled: bool = True, source: Source = Source.USER) -> Entry:
    return Entry(
        path=Path(f"/autostart/{name.lower()}.desktop"),
        source=source,
        document=Document(),
        name=name,
        command=f"/usr/bin/{name.lower()}",
        enabled=enabled,
    )


@pytest.fixture
def mixed():
    """A: enabled/user, B: disabled/user, C: enabled/system, D: disabled/system."""
    return [
        _entry("A", True, Source.USER),
        _entry("B", False, Source.USER),
        _entry("C", True, Source.SYSTEM),
        _entry("D", False, Source.SYSTEM),
    ]


class TestApplyFilter:
    def test_everything_visible_by_default(self, mixed):
        assert apply_filter(mixed, FilterConfig()) == [0, 1, 2, 3]

    def test_enabled_only(self, mixed):
        """
        Given one entry per status/source combination
        When only enabled entries are shown
        Then A and C remain in input order
        """
        config = FilterConfig(show_disabled=False)
        assert apply_filter(mixed, config) == [0, 2]

    def test_status_and_source_combine(self, mixed):
        """
        Given one entry per status/source combination
        When only disabled system entries are shown
        Then only D remains
        """
        config = FilterConfig(show_enabled=False, show_user=False)
        assert apply_filter(mixed, config) == [3]

    def test_both_statuses_deselected_shows_nothing(self, mixed):
        """
        Given enabled and disabled both deselected
        When filtered
        Then the result is empty
        """
        assert apply_filter(mixed, FilterConfig(show_enabled=False, show_disabled=False)) == []

    def test_both_sources_deselected_shows_nothing(self, mixed):
        assert apply_filter(mixed, FilterConfig(show_user=False, show_system=False)) == []

    def test_query_narrows_by_name_or_command(self, mixed):
        """
        Given a search query
        When filtered
        Then only entries whose name, command or file name contain it remain
        """
        assert apply_filter(mixed, FilterConfig(query="usr/bin/c")) == [2]
        assert apply_filter(mixed, FilterConfig(query="b")) == [0, 1, 2, 3]
        assert apply_filter(mixed, FilterConfig(query="d.desktop")) == [3]

    def test_input_is_not_mutated(self, mixed):
        snapshot = [(e.name, e.enabled, e.source) for e in mixed]
        apply_filter(mixed, FilterConfig(show_user=False))
        assert [(e.name, e.enabled, e.source) for e in mixed] == snapshot


class TestSortIndices:
    @pytest.fixture
    def fruits(self):
        return [_entry("banana"), _entry("Apple"), _entry("apple")]

    def test_name_ascending_is_case_insensitive_and_stable(self, fruits):
        """
        Given banana, Apple, apple
        When sorted by name ascending
        Then Apple and apple keep their relative order ahead of banana
        """
        assert sort_indices(fruits, SortOrder.NAME_ASC) == [1, 2, 0]

    def test_name_descending_keeps_ties_in_index_order(self, fruits):
        """
        Given banana, Apple, apple
        When sorted by name descending
        Then banana leads and the equal names keep their original order
        """
        assert sort_indices(fruits, SortOrder.NAME_DESC) == [0, 1, 2]

    def test_status_enabled_first(self, mixed):
        """
        Given enabled and disabled entries
        When sorted by status
        Then enabled entries come first, each group by name
        """
        assert sort_indices(mixed, SortOrder.STATUS) == [0, 2, 1, 3]

    def test_status_disabled_first(self, mixed):
        assert sort_indices(mixed, SortOrder.STATUS, enabled_first=False) == [1, 3, 0, 2]

    def test_source_user_first(self, mixed):
        assert sort_indices(mixed, SortOrder.SOURCE_USER_FIRST) == [0, 1, 2, 3]

    def test_source_system_first(self, mixed):
        """
        Given user and system entries
        When sorted system-first
        Then system entries lead, each group by name
        """
        assert sort_indices(mixed, SortOrder.SOURCE_SYSTEM_FIRST) == [2, 3, 0, 1]

    def test_sorts_only_given_indices(self, mixed):
        """
        Given a subset of indices
        When sorted
        Then only those indices are returned
        """
        assert sort_indices(mixed, SortOrder.NAME_DESC, indices=[0, 3]) == [3, 0]

    @pytest.mark.parametrize("order", list(SortOrder))
    def test_result_is_a_permutation(self, mixed, order):
        assert sorted(sort_indices(mixed, order)) == [0, 1, 2, 3]


class TestVisibleIndices:
    def test_filter_then_sort(self, mixed):
        """
        Given a filter hiding user entries and a name-descending order
        When the visible list is derived
        Then D precedes C
        """
        config = FilterConfig(show_user=False)
        assert visible_indices(mixed, config, SortOrder.NAME_DESC) == [3, 2]

    def test_empty_input(self):
        assert visible_indices([], FilterConfig(), SortOrder.STATUS) == []
