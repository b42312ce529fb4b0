"""
Entrant statistics and ranking with the tiebreak cascade.

Ranking order:
    1. Points (desc)
    2. Total game score (desc)
    3. Head-to-head: among entrants tied on 1-2, a direct winner ranks
       above the entrant it beat, unless the tied block's results are cyclic
    4. Wins (desc)
    5. Losses (asc)
    6. Score differential (desc)
    7. Name (asc)
"""
import logging
from itertools import groupby
from typing import Dict, Iterable, List, Set

from .models import Entrant, Group, Match

logger = logging.getLogger(__name__)


def recompute_stats(entrants: Iterable[Entrant], matches: Iterable[Match],
                    points_for_win: int = 3, points_for_draw: int = 1) -> None:
    """
    Rebuild every entrant's cumulative record from the completed matches.

    Stats are always replayed from scratch, so resubmitting a result
    replaces it instead of counting it twice.
    """
    by_id = {entrant.id: entrant for entrant in entrants}
    for entrant in by_id.values():
        entrant.reset_stats()

    for match in matches:
        if not match.completed or not match.result:
            continue
        for entrant_id, result in match.result.items():
            entrant = by_id.get(entrant_id)
            if entrant is None:
                continue
            points = result.get('points', 0)
            entrant.matches_played += 1
            entrant.points += points
            if points >= points_for_win:
                entrant.wins += 1
            elif points == points_for_draw:
                entrant.draws += 1
            else:
                entrant.losses += 1

            score = result.get('score')
            if score is not None:
                entrant.total_score += score
                opponent_result = match.result.get(match.opponent_of(entrant_id)) or {}
                opponent_score = opponent_result.get('score')
                if opponent_score is not None:
                    entrant.score_differential += score - opponent_score


def head_to_head(entrant_a_id: str, entrant_b_id: str, matches: Iterable[Match]) -> int:
    """
    Result of the completed direct match between two entrants.

    Returns a positive number if A won, negative if B won and 0 when
    they never met or drew.
    """
    for match in matches:
        if not match.completed or not match.result:
            continue
        if match.involves(entrant_a_id) and match.involves(entrant_b_id):
            a_points = (match.result.get(entrant_a_id) or {}).get('points', 0)
            b_points = (match.result.get(entrant_b_id) or {}).get('points', 0)
            return a_points - b_points
    return 0


def _record_key(entrant: Entrant):
    # Levels 4-7; id keeps identically named entrants in a stable order
    return (-entrant.wins, entrant.losses, -entrant.score_differential, entrant.name, entrant.id)


def _beaten_by(block: List[Entrant], matches: List[Match]) -> Dict[str, Set[str]]:
    """Map each entrant in block to the block members that beat it directly."""
    beaten_by = {entrant.id: set() for entrant in block}
    for match in matches:
        entrant1_id, entrant2_id = match.entrant_ids
        if entrant1_id not in beaten_by or entrant2_id not in beaten_by:
            continue
        h2h = head_to_head(entrant1_id, entrant2_id, [match])
        if h2h > 0:
            beaten_by[entrant2_id].add(entrant1_id)
        elif h2h < 0:
            beaten_by[entrant1_id].add(entrant2_id)
    return beaten_by


def _order_tied_block(block: List[Entrant], matches: List[Match]) -> List[Entrant]:
    """
    Order entrants tied on points and total score.

    Entrants are taken in record order, except that nobody is placed
    before a remaining block member who beat them. When every remaining
    entrant lost to another one the results are cyclic, and the block
    keeps plain record order.
    """
    ordered = sorted(block, key=_record_key)
    if len(ordered) < 2:
        return ordered

    beaten_by = _beaten_by(ordered, matches)
    remaining = list(ordered)
    result = []
    while remaining:
        remaining_ids = {entrant.id for entrant in remaining}
        for entrant in remaining:
            if not beaten_by[entrant.id] & remaining_ids:
                break
        else:
            return ordered
        result.append(entrant)
        remaining.remove(entrant)
    return result


def rank_entrants(entrants: Iterable[Entrant], matches: Iterable[Match]) -> List[Entrant]:
    """Return entrants best first."""
    matches = list(matches)
    by_level = sorted(entrants, key=lambda e: (-e.points, -e.total_score))
    ranked = []
    for _, block in groupby(by_level, key=lambda e: (e.points, e.total_score)):
        ranked.extend(_order_tied_block(list(block), matches))
    return ranked


def rank_groups(groups: Iterable[Group], entrants: Iterable[Entrant],
                matches: Iterable[Match]) -> Dict[str, List[Entrant]]:
    """Rank each group against its own matches: {group_id: [Entrant, ...]}."""
    by_id = {entrant.id: entrant for entrant in entrants}
    matches = list(matches)
    standings = {}
    for group in groups:
        members = [by_id[entrant_id] for entrant_id in group.entrant_ids if entrant_id in by_id]
        group_matches = [m for m in matches if m.group_id == group.id]
        standings[group.id] = rank_entrants(members, group_matches)
        logger.debug(f"Standings for {group.name or group.id}: {[e.name for e in standings[group.id]]}")
    return standings
