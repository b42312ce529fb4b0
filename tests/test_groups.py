"""
Unit tests for group construction.
"""
import pytest
import random
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tourney.errors import InvalidInputError
from tourney.groups import (
    GROUP_SIZES,
    build_groups,
    default_group_name,
    entrants_after_padding,
    group_sizes,
)
from tourney.models import Entrant


class TestGroupSizes:
    """Tests for the fixed group size table."""

    @pytest.mark.parametrize("count,expected", [
        (4, [4]),
        (6, [3, 3]),
        (7, [7]),
        (8, [4, 4]),
        (9, [3, 3, 3]),
        (10, [5, 5]),
        (12, [4, 4, 4]),
        (14, [7, 7]),
        (15, [5, 5, 5]),
        (16, [4, 4, 4, 4]),
    ])
    def test_table_sizes(self, count, expected):
        """Test group sizes follow the lookup table."""
        assert group_sizes(count) == expected

    def test_ten_entrants_use_two_fives(self):
        """Test 10 entrants give two groups of 5, not groups of 4."""
        assert group_sizes(10) == [5, 5]

    def test_padding_for_eleven_and_thirteen(self):
        """Test 11 and 13 are padded to 12 and 14."""
        assert entrants_after_padding(11) == 12
        assert entrants_after_padding(13) == 14
        assert entrants_after_padding(12) == 12
        assert group_sizes(entrants_after_padding(13)) == [7, 7]
        assert group_sizes(entrants_after_padding(11)) == [4, 4, 4]

    def test_unpadded_rows(self):
        """Test the table still covers 11 and 13 directly."""
        assert group_sizes(11) == [4, 4, 3]
        assert group_sizes(13) == [7, 6]

    def test_three_entrants_single_group(self):
        """Test 3 entrants form one group."""
        assert group_sizes(3) == [3]

    def test_too_few_entrants(self):
        """Test 2 entrants cannot form groups."""
        with pytest.raises(InvalidInputError):
            group_sizes(2)

    @pytest.mark.parametrize("count", [17, 18, 20, 23, 32])
    def test_large_counts_use_groups_of_four(self, count):
        """Test counts above 16 use ceil(N/4) groups balanced within one."""
        sizes = group_sizes(count)
        assert len(sizes) == -(-count // 4)
        assert sum(sizes) == count
        assert max(sizes) - min(sizes) <= 1

    def test_table_totals(self):
        """Test every table row adds up to its entrant count."""
        for count, sizes in GROUP_SIZES.items():
            assert sum(sizes) == count


class TestBuildGroups:
    """Tests for shuffling and dealing entrants into groups."""

    def _entrants(self, count):
        return [Entrant(f"E{i}") for i in range(count)]

    @pytest.mark.parametrize("count", [3, 4, 5, 6, 7, 8, 9, 10, 12, 14, 15, 16, 19])
    def test_every_entrant_placed_once(self, count):
        """Test groups cover all entrants with no duplicates."""
        entrants = self._entrants(count)
        groups = build_groups(entrants, rng=random.Random(1))

        placed = [entrant_id for group in groups for entrant_id in group.entrant_ids]
        assert sorted(placed) == sorted(e.id for e in entrants)
        assert sorted(len(g) for g in groups) == sorted(group_sizes(count))

    def test_same_seed_same_groups(self):
        """Test an injected RNG makes the draw repeatable."""
        entrants = self._entrants(12)
        first = build_groups(entrants, rng=random.Random(42))
        second = build_groups(entrants, rng=random.Random(42))
        assert [g.entrant_ids for g in first] == [g.entrant_ids for g in second]

    def test_input_not_mutated(self):
        """Test the caller's list keeps its order."""
        entrants = self._entrants(8)
        before = list(entrants)
        build_groups(entrants, rng=random.Random(3))
        assert entrants == before

    def test_groups_get_names_and_ids(self):
        """Test groups are named Group A, Group B, ... with distinct ids."""
        groups = build_groups(self._entrants(9), rng=random.Random(5))
        assert [g.name for g in groups] == ['Group A', 'Group B', 'Group C']
        assert len({g.id for g in groups}) == 3

    def test_default_group_name_past_z(self):
        """Test names continue with two letters after Z."""
        assert default_group_name(0) == 'Group A'
        assert default_group_name(25) == 'Group Z'
        assert default_group_name(26) == 'Group AA'
