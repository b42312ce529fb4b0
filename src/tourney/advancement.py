"""
Bracket advancement: recording winners and best-of-N series games.

A bracket match is pending until both slots are filled, ready while it
waits for a result and decided once it has a winner. Deciding a match
moves the winner along its forward edge and, for semifinals, the loser
into the third place match.
"""
import logging
from typing import List, Optional, Sequence

from .errors import InvalidInputError, InvalidStateError, NotFoundError
from .models import BracketMatch, DECIDED, GameResult, PENDING, READY, SEMIFINAL, THIRD_PLACE

logger = logging.getLogger(__name__)


def find_bracket_match(bracket: Sequence[BracketMatch], match_id: str) -> BracketMatch:
    for node in bracket:
        if node.id == match_id:
            return node
    raise NotFoundError(f"Bracket match not found: {match_id}")


def _third_place_match(bracket: Sequence[BracketMatch]) -> Optional[BracketMatch]:
    for node in bracket:
        if node.kind == THIRD_PLACE:
            return node
    return None


def series_wins_needed(best_of: int) -> int:
    """Games needed to take a best-of-N series (2 of 3, 3 of 5)."""
    return best_of // 2 + 1


def submit_winner(bracket: List[BracketMatch], match_id: str, winner_id: str) -> BracketMatch:
    """Decide a ready bracket match and propagate its result."""
    node = find_bracket_match(bracket, match_id)
    if node.status == DECIDED:
        raise InvalidStateError(f"{node.label} is already decided")
    if node.status == PENDING:
        raise InvalidStateError(f"{node.label} is still waiting for entrants")
    if winner_id not in node.entrant_ids:
        raise InvalidInputError("Winner must be one of the entrants in the match")

    next_node = find_bracket_match(bracket, node.next_match_id) if node.next_match_id else None
    third_place = _third_place_match(bracket) if node.kind == SEMIFINAL else None
    if third_place is not None and None not in third_place.entrant_ids:
        raise RuntimeError(f"Third place match is already full, cannot place loser of {node.label}")

    node.winner_id = winner_id
    if next_node is not None:
        next_node.set_slot(node.next_slot, winner_id)
    if third_place is not None:
        third_place.set_slot(1 if third_place.entrant1_id is None else 2, node.loser_id)

    logger.debug(f"{node.label} decided, winner {winner_id}")
    return node


def record_game(bracket: List[BracketMatch], match_id: str, game: GameResult) -> BracketMatch:
    """
    Add one game to a series and finalize the match once a side has a
    majority of best_of.
    """
    node = find_bracket_match(bracket, match_id)
    if len(node.games) >= node.best_of:
        raise InvalidInputError(f"{node.label} already has {node.best_of} games (best of {node.best_of})")
    if node.status != READY:
        raise InvalidStateError(f"{node.label} is {node.status}, cannot record a game")
    if game.winner_id not in node.entrant_ids:
        raise InvalidInputError("Game winner must be one of the entrants in the match")

    node.games.append(game)
    if game.winner_id == node.entrant1_id:
        node.entrant1_wins += 1
    else:
        node.entrant2_wins += 1

    needed = series_wins_needed(node.best_of)
    if node.entrant1_wins >= needed:
        submit_winner(bracket, match_id, node.entrant1_id)
    elif node.entrant2_wins >= needed:
        submit_winner(bracket, match_id, node.entrant2_id)
    return node


def is_bracket_complete(bracket: Sequence[BracketMatch]) -> bool:
    return bool(bracket) and all(node.status == DECIDED for node in bracket)
