"""
Group-stage plus playoff tournament engine.
"""
from .errors import (InsufficientEntrantsError, InvalidInputError, InvalidStateError,
                     NotFoundError, TournamentError)
from .tournament import Tournament

__all__ = [
    'Tournament',
    'TournamentError',
    'NotFoundError',
    'InvalidStateError',
    'InvalidInputError',
    'InsufficientEntrantsError',
]
