"""
Playoff bracket generation: qualification, seeding and topology.

Supported topologies:
- DIRECT_FINAL: two seeds, Grand Final only
- FINAL_AND_THIRD: four entrants who already all met in one group,
  1v2 Grand Final plus 3v4 third place match
- SEMIFINALS: 1v4 and 2v3, winners to the final, losers to third place
- SIX_SEED: seeds 1-2 wait in the semifinals, 3v6 and 4v5 quarterfinals
- EIGHT_SEED: 1v8, 4v5, 2v7, 3v6 quarterfinals, then semis and final
"""
import logging
from collections import Counter
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .errors import InvalidInputError
from .models import BracketMatch, Entrant, FINAL, QUARTERFINAL, SEMIFINAL, THIRD_PLACE
from .ranking import rank_entrants

logger = logging.getLogger(__name__)

MAX_QUALIFIERS = 8


class Topology(Enum):
    DIRECT_FINAL = 'direct_final'
    FINAL_AND_THIRD = 'final_and_third'
    SEMIFINALS = 'semifinals'
    SIX_SEED = 'six_seed'
    EIGHT_SEED = 'eight_seed'


def get_round_label(kind: str, number: int = 1) -> str:
    """Get the display label of a bracket match."""
    if kind == FINAL:
        return "Grand Final"
    elif kind == THIRD_PLACE:
        return "3rd Place Match"
    elif kind == SEMIFINAL:
        return f"Semifinal {number}"
    elif kind == QUARTERFINAL:
        return f"Quarterfinal {number}"
    else:
        return f"{kind.title()} {number}"


def _generate_bracket_order(bracket_size: int) -> List[int]:
    """
    Generate the standard tournament bracket order.
    This ensures that if all higher seeds win, they meet in the proper rounds.

    For 8 seeds: [1, 8, 4, 5, 2, 7, 3, 6]
    This gives matchups: 1v8, 4v5, 2v7, 3v6
    Winners: 1v4 side, 2v3 side
    """
    if bracket_size == 2:
        return [1, 2]

    half_size = bracket_size // 2
    upper_half = _generate_bracket_order(half_size)
    lower_half = [bracket_size + 1 - seed for seed in upper_half]

    result = []
    for u, l in zip(upper_half, lower_half):
        result.extend([u, l])
    return result


def qualifiers_per_group(group_count: int, total_entrants: int) -> int:
    """How many entrants advance from each group."""
    if group_count < 1:
        raise InvalidInputError("Cannot qualify entrants without groups")
    if group_count == 1:
        if total_entrants == 3:
            return 2
        return min(4, total_entrants)
    if group_count == 2:
        return 4 if total_entrants / 2 >= 5 else 2
    return 2


def qualifier_count(group_count: int, total_entrants: int) -> int:
    """Total playoff size for the group layout."""
    count = qualifiers_per_group(group_count, total_entrants) * group_count
    if group_count >= 4:
        count = min(count, MAX_QUALIFIERS)
    return min(count, total_entrants)


def seed_qualifiers(standings: Dict[str, List[Entrant]], per_group: int,
                    cap: Optional[int] = None) -> List[Tuple[Entrant, int, str]]:
    """
    Pick the qualifiers from each group's standings and seed them.
    Returns list of (entrant, seed, group_id) tuples.

    Groups are ordered by how their winners rank against each other,
    then entrants are placed so first-round opponents come from
    different groups:
    - 1 group: standings order
    - 2 groups: G1-1st, G2-1st, G1-2nd, G2-2nd, ...
    - 3 groups of two qualifiers: G1-1st, G2-1st, G3-1st, G2-2nd, G3-2nd, G1-2nd
      so neither quarterfinal nor semifinal repeats a group pairing
    - otherwise: round-robin by within-group rank
    Bye entrants never qualify.
    """
    pools = []
    for group_id, ranked in standings.items():
        advancing = [entrant for entrant in ranked if not entrant.is_bye][:per_group]
        if advancing:
            pools.append((group_id, advancing))

    if not pools:
        return []

    winner_order = {e.id: i for i, e in enumerate(rank_entrants([p[1][0] for p in pools], []))}
    pools.sort(key=lambda pool: winner_order[pool[1][0].id])

    if len(pools) == 1:
        group_id, advancing = pools[0]
        placed = [(entrant, group_id) for entrant in advancing]
    elif len(pools) == 3 and all(len(advancing) == 2 for _, advancing in pools):
        placement = [(0, 0), (1, 0), (2, 0), (1, 1), (2, 1), (0, 1)]
        placed = [(pools[g][1][rank], pools[g][0]) for g, rank in placement]
    else:
        placed = []
        deepest = max(len(advancing) for _, advancing in pools)
        for rank in range(deepest):
            for group_id, advancing in pools:
                if rank < len(advancing):
                    placed.append((advancing[rank], group_id))

    if cap is not None:
        placed = placed[:cap]

    return [(entrant, seed, group_id) for seed, (entrant, group_id) in enumerate(placed, start=1)]


def select_topology(qualifiers: int, total_entrants: int, group_count: int) -> Topology:
    """Pick the bracket shape for the number of qualifiers."""
    if qualifiers < 2:
        raise InvalidInputError(f"Need at least 2 qualifiers for a bracket, got {qualifiers}")
    if qualifiers < 4:
        return Topology.DIRECT_FINAL
    if qualifiers == 4 and total_entrants == 4 and group_count <= 1:
        return Topology.FINAL_AND_THIRD
    if qualifiers == 6:
        return Topology.SIX_SEED
    if qualifiers == 8:
        return Topology.EIGHT_SEED
    # 4, and any other size, plays semifinals between the top four
    return Topology.SEMIFINALS


def _node(key, kind, number, round_number, seeds=(None, None), advance=None):
    return {
        'key': key,
        'kind': kind,
        'label': get_round_label(kind, number),
        'round': round_number,
        'seeds': seeds,
        'advance': advance,
    }


def _direct_final_layout():
    return [_node('F', FINAL, 1, 1, seeds=(1, 2))]


def _final_and_third_layout():
    return [
        _node('3P', THIRD_PLACE, 1, 1, seeds=(3, 4)),
        _node('F', FINAL, 1, 1, seeds=(1, 2)),
    ]


def _semifinals_layout():
    order = _generate_bracket_order(4)
    return [
        _node('SF1', SEMIFINAL, 1, 1, seeds=(order[0], order[1]), advance=('F', 1)),
        _node('SF2', SEMIFINAL, 2, 1, seeds=(order[2], order[3]), advance=('F', 2)),
        _node('3P', THIRD_PLACE, 1, 2),
        _node('F', FINAL, 1, 2),
    ]


def _six_seed_layout():
    # Quarterfinal winners take the slot opposite the waiting top seeds
    return [
        _node('QF1', QUARTERFINAL, 1, 1, seeds=(3, 6), advance=('SF2', 2)),
        _node('QF2', QUARTERFINAL, 2, 1, seeds=(4, 5), advance=('SF1', 2)),
        _node('SF1', SEMIFINAL, 1, 2, seeds=(1, None), advance=('F', 1)),
        _node('SF2', SEMIFINAL, 2, 2, seeds=(2, None), advance=('F', 2)),
        _node('3P', THIRD_PLACE, 1, 3),
        _node('F', FINAL, 1, 3),
    ]


def _eight_seed_layout():
    order = _generate_bracket_order(8)
    layout = []
    for i in range(4):
        layout.append(_node(f'QF{i + 1}', QUARTERFINAL, i + 1, 1,
                            seeds=(order[2 * i], order[2 * i + 1]),
                            advance=(f'SF{i // 2 + 1}', i % 2 + 1)))
    layout.extend([
        _node('SF1', SEMIFINAL, 1, 2, advance=('F', 1)),
        _node('SF2', SEMIFINAL, 2, 2, advance=('F', 2)),
        _node('3P', THIRD_PLACE, 1, 3),
        _node('F', FINAL, 1, 3),
    ])
    return layout


TOPOLOGY_LAYOUTS: Dict[Topology, Callable[[], List[Dict]]] = {
    Topology.DIRECT_FINAL: _direct_final_layout,
    Topology.FINAL_AND_THIRD: _final_and_third_layout,
    Topology.SEMIFINALS: _semifinals_layout,
    Topology.SIX_SEED: _six_seed_layout,
    Topology.EIGHT_SEED: _eight_seed_layout,
}

TOPOLOGY_SEEDS = {
    Topology.DIRECT_FINAL: 2,
    Topology.FINAL_AND_THIRD: 4,
    Topology.SEMIFINALS: 4,
    Topology.SIX_SEED: 6,
    Topology.EIGHT_SEED: 8,
}


def build_bracket(topology: Topology, seeded_ids: Sequence[str], best_of: int = 3) -> List[BracketMatch]:
    """
    Create every bracket match for a topology in one go.

    seeded_ids[0] is seed 1. Extra seeds beyond what the topology uses
    are ignored. First-round slots are filled and each match that feeds
    another one records (next_match_id, next_slot).
    """
    if best_of < 1 or best_of % 2 == 0:
        raise InvalidInputError(f"best_of must be a positive odd number, got {best_of}")
    required = TOPOLOGY_SEEDS[topology]
    if len(seeded_ids) < required:
        raise InvalidInputError(f"{topology.value} bracket needs {required} seeds, got {len(seeded_ids)}")

    layout = TOPOLOGY_LAYOUTS[topology]()
    nodes = {}
    for entry in layout:
        seed1, seed2 = entry['seeds']
        nodes[entry['key']] = BracketMatch(
            entry['kind'], entry['label'], entry['round'],
            entrant1_id=seeded_ids[seed1 - 1] if seed1 else None,
            entrant2_id=seeded_ids[seed2 - 1] if seed2 else None,
            best_of=best_of,
        )

    for entry in layout:
        if entry['advance']:
            target_key, slot = entry['advance']
            nodes[entry['key']].next_match_id = nodes[target_key].id
            nodes[entry['key']].next_slot = slot

    bracket = [nodes[entry['key']] for entry in layout]
    logger.debug(f"Built {topology.value} bracket: {[node.label for node in bracket]}")
    return bracket


def count_by_kind(bracket: Sequence[BracketMatch]) -> Dict[str, int]:
    """Number of bracket matches of each kind, e.g. {'semifinal': 2, 'final': 1}."""
    return dict(Counter(node.kind for node in bracket))
