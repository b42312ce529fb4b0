"""
Exceptions raised by the tournament engine.

Every engine operation either completes or raises one of these before
touching any state. Callers decide whether to retry.
"""


class TournamentError(Exception):
    """Base class for all engine errors."""


class NotFoundError(TournamentError):
    """An entrant, group, match or bracket match does not exist."""


class InvalidStateError(TournamentError):
    """Operation attempted outside the lifecycle state it requires."""


class InvalidInputError(TournamentError):
    """Bad arguments: empty name, winner not in the match, series full, etc."""


class InsufficientEntrantsError(TournamentError):
    """Not enough entrants to start the tournament in its current mode."""
