"""
Exceptions for faults that are not part of normal play.

Rejected player actions (not your turn, no token, illegal move, ...) are NOT exceptions:
the Move Mediator returns those as outcomes. Everything below signals a programming error,
a bad configuration or an unknown resource, and is propagated up through the service.
"""


class GameError(Exception):
    """Top-level exception for this project. Callers can catch this one to handle any of the others."""


class GameStateError(GameError):
    """The game is (or would end up) in an inconsistent state."""


class InvalidFENError(GameError):
    """The rules engine cannot load the supplied FEN."""


class InvalidPoolError(GameError):
    """Starting token pools are malformed."""


class InvalidRequestError(GameError):
    """A request from the presentation layer failed validation."""


class RepositoryError(GameError):
    """Could not find / store a game record."""


class ConfigurationError(GameError):
    """A setting read from the environment has an unusable value."""
