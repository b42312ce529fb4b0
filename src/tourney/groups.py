"""
Group (pod) construction for the round-robin stage.
"""
import logging
import math
import random
from typing import Dict, List, Optional

from .errors import InvalidInputError
from .models import Entrant, Group

logger = logging.getLogger(__name__)

# Explicit lookup for 4..16 entrants. 11 and 13 are padded with a bye
# before grouping, so their rows only matter when padding is skipped.
GROUP_SIZES: Dict[int, List[int]] = {
    4: [4],
    5: [5],
    6: [3, 3],
    7: [7],
    8: [4, 4],
    9: [3, 3, 3],
    10: [5, 5],
    11: [4, 4, 3],
    12: [4, 4, 4],
    13: [7, 6],
    14: [7, 7],
    15: [5, 5, 5],
    16: [4, 4, 4, 4],
}

BYE_PADDING = {11: 12, 13: 14}


def entrants_after_padding(num_entrants: int) -> int:
    """Entrant count once the synthetic bye (if any) has been added."""
    return BYE_PADDING.get(num_entrants, num_entrants)


def group_sizes(num_entrants: int) -> List[int]:
    """Return the group sizes for a given entrant count, largest first."""
    if num_entrants < 3:
        raise InvalidInputError(f"Need at least 3 entrants for a group stage, got {num_entrants}")
    if num_entrants == 3:
        return [3]
    if num_entrants in GROUP_SIZES:
        return list(GROUP_SIZES[num_entrants])

    num_groups = math.ceil(num_entrants / 4)
    base, extra = divmod(num_entrants, num_groups)
    return [base + 1 if i < extra else base for i in range(num_groups)]


def build_groups(entrants: List[Entrant], rng: Optional[random.Random] = None) -> List[Group]:
    """
    Shuffle entrants and deal them into groups.

    Dealing is index mod group count, so group sizes differ by at most
    one and match group_sizes() for the entrant count. The input list
    is not modified.
    """
    sizes = group_sizes(len(entrants))
    num_groups = len(sizes)

    shuffled = list(entrants)
    (rng or random).shuffle(shuffled)

    members: List[List[str]] = [[] for _ in range(num_groups)]
    for index, entrant in enumerate(shuffled):
        members[index % num_groups].append(entrant.id)

    groups = [Group(entrant_ids, name=default_group_name(i)) for i, entrant_ids in enumerate(members)]
    logger.debug(f"Built {num_groups} groups with sizes {[len(g) for g in groups]}")
    return groups


def default_group_name(index: int) -> str:
    """Display name for the index-th group: Group A, Group B, ..."""
    letters = ''
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord('A') + remainder) + letters
    return f"Group {letters}"
