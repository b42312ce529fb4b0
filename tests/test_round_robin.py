"""
Unit tests for round-robin scheduling.
"""
import pytest
import sys
import os
from collections import Counter, defaultdict
from itertools import combinations

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tourney.errors import InvalidInputError
from tourney.models import Group
from tourney.round_robin import round_robin_rounds, schedule_group


class TestRoundRobinRounds:
    """Tests for the circle method."""

    def test_four_entrants(self):
        """Test the exact rounds for four entrants."""
        rounds = round_robin_rounds(['A', 'B', 'C', 'D'])
        assert rounds == [
            [('A', 'D'), ('B', 'C')],
            [('A', 'C'), ('D', 'B')],
            [('A', 'B'), ('C', 'D')],
        ]

    def test_three_entrants(self):
        """Test odd counts play n rounds with one entrant resting."""
        rounds = round_robin_rounds(['A', 'B', 'C'])
        assert len(rounds) == 3
        assert all(len(r) == 1 for r in rounds)
        pairs = {frozenset(p) for r in rounds for p in r}
        assert pairs == {frozenset('AB'), frozenset('AC'), frozenset('BC')}

    def test_two_entrants(self):
        """Test two entrants meet once."""
        assert round_robin_rounds(['A', 'B']) == [[('A', 'B')]]

    def test_too_few_entrants(self):
        """Test a single entrant cannot be scheduled."""
        with pytest.raises(InvalidInputError):
            round_robin_rounds(['A'])

    @pytest.mark.parametrize("n", range(2, 17))
    def test_round_count_is_minimal(self, n):
        """Test n-1 rounds for even n and n rounds for odd n."""
        rounds = round_robin_rounds([str(i) for i in range(n)])
        assert len(rounds) == (n - 1 if n % 2 == 0 else n)

    @pytest.mark.parametrize("n", range(2, 17))
    def test_no_entrant_plays_twice_in_a_round(self, n):
        """Test each round is conflict free."""
        for pairings in round_robin_rounds([str(i) for i in range(n)]):
            seen = [entrant for pair in pairings for entrant in pair]
            assert len(seen) == len(set(seen))


class TestScheduleGroup:
    """Tests for the flat match list of a group."""

    @pytest.mark.parametrize("n", range(2, 17))
    def test_round_robin_completeness(self, n):
        """Test every pair meets exactly once and everyone plays n-1 matches."""
        group = Group([f"e{i}" for i in range(n)])
        matches = schedule_group(group)

        assert len(matches) == n * (n - 1) // 2

        pairs = Counter(frozenset(m.entrant_ids) for m in matches)
        expected = {frozenset(p) for p in combinations(group.entrant_ids, 2)}
        assert set(pairs) == expected
        assert all(count == 1 for count in pairs.values())

        opponents = defaultdict(list)
        for m in matches:
            opponents[m.entrant1_id].append(m.entrant2_id)
            opponents[m.entrant2_id].append(m.entrant1_id)
        for entrant_id in group.entrant_ids:
            assert len(opponents[entrant_id]) == n - 1
            assert set(opponents[entrant_id]) == set(group.entrant_ids) - {entrant_id}

    def test_matches_carry_group_and_round(self):
        """Test matches belong to the group and rounds start at 1."""
        group = Group(['a', 'b', 'c', 'd', 'e'])
        matches = schedule_group(group)
        assert all(m.group_id == group.id for m in matches)
        assert {m.round_number for m in matches} == {1, 2, 3, 4, 5}
        assert not any(m.completed for m in matches)
