"""
Shared pytest fixtures for tournament engine tests.

Running tests:
    pytest tests/                  - full suite
    pytest tests/ -m "not slow"   - skip the full simulated tournaments
"""
import pytest
import random
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tourney.models import Entrant, Match
from tourney.tournament import Tournament


def make_tournament(count, seed=7, mode='solo', settings=None):
    """Tournament in registration with entrants named P01, P02, ..."""
    tournament = Tournament('Test Cup', mode=mode, settings=settings, rng=random.Random(seed))
    for i in range(1, count + 1):
        tournament.add_entrant(f"P{i:02d}")
    return tournament


def decide(tournament, match, winner_id, winner_score=None, loser_score=None):
    """Submit a 3-0 result for match in favour of winner_id."""
    loser_id = match.opponent_of(winner_id)
    return tournament.submit_match_result(match.id, {
        winner_id: {'points': 3, 'score': winner_score},
        loser_id: {'points': 0, 'score': loser_score},
    })


def play_group_stage(tournament):
    """Complete every group match; the alphabetically earlier name wins, byes always lose."""
    names = {e.id: e for e in tournament.entrants}
    for match in tournament.matches:
        first, second = names[match.entrant1_id], names[match.entrant2_id]
        if first.is_bye:
            winner = second
        elif second.is_bye:
            winner = first
        else:
            winner = min(first, second, key=lambda e: e.name)
        decide(tournament, match, winner.id)


def play_bracket(tournament):
    """Decide every bracket match in round order, entrant1 always wins."""
    while tournament.state == 'playoffs':
        ready = [node for node in tournament.bracket if node.status == 'ready']
        assert ready, "bracket stalled with no ready matches"
        node = min(ready, key=lambda n: n.round_number)
        tournament.submit_bracket_winner(node.id, node.entrant1_id)


@pytest.fixture
def registration_tournament():
    """Four entrants, still in registration."""
    return make_tournament(4)


@pytest.fixture
def entrants():
    """Four bare entrants for ranking tests."""
    return [Entrant(name) for name in ('Alice', 'Bob', 'Charlie', 'Dave')]


@pytest.fixture
def match_factory():
    """Build a completed group match between two entrants."""
    def _make(a, b, a_points, b_points, a_score=None, b_score=None, group_id='g1'):
        match = Match(group_id, 1, a.id, b.id)
        match.result = {
            a.id: {'points': a_points, 'score': a_score},
            b.id: {'points': b_points, 'score': b_score},
        }
        match.completed = True
        return match
    return _make
