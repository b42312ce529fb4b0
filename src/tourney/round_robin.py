"""
Round-robin scheduling within a group (circle method).
"""
from typing import List, Sequence, Tuple

from .errors import InvalidInputError
from .models import Group, Match


def round_robin_rounds(entrant_ids: Sequence[str]) -> List[List[Tuple[str, str]]]:
    """
    Split every pairing of the given entrants into conflict-free rounds.

    Position i plays position n-1-i. With an even count the first
    position stays put and the last one moves to the second position
    after each round (n-1 rounds). With an odd count every position
    rotates by one (n rounds) and the middle seat sits out.

    For 4 entrants [A, B, C, D]:
        Round 1: A-D, B-C
        Round 2: A-C, D-B
        Round 3: A-B, C-D
    """
    n = len(entrant_ids)
    if n < 2:
        raise InvalidInputError(f"Round-robin needs at least 2 entrants, got {n}")

    matches_per_round = n // 2
    total_rounds = n - 1 if n % 2 == 0 else n
    seats = list(entrant_ids)

    rounds = []
    for _ in range(total_rounds):
        rounds.append([(seats[i], seats[n - 1 - i]) for i in range(matches_per_round)])
        if n % 2 == 0:
            seats.insert(1, seats.pop())
        else:
            seats.append(seats.pop(0))
    return rounds


def schedule_group(group: Group) -> List[Match]:
    """Create the flat match list for a group, round numbers starting at 1."""
    matches = []
    for round_index, pairings in enumerate(round_robin_rounds(group.entrant_ids)):
        for entrant1_id, entrant2_id in pairings:
            matches.append(Match(group.id, round_index + 1, entrant1_id, entrant2_id))
    return matches
