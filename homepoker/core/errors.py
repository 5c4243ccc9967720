"""
Error taxonomy for the table engine.

Initialization and deck errors are raised to the caller. Betting-action
errors are raised internally and absorbed by the action processor, which
returns the table unchanged.
"""


class PokerError(ValueError):
    """Base class for all engine errors."""


class InsufficientPlayers(PokerError):
    """Fewer than two players can be dealt into a hand."""


class InsufficientCards(PokerError):
    """The deck ran out of cards mid-deal."""


class InvalidAction(PokerError):
    """A betting action is not legal in the current state."""


class InvalidCards(PokerError):
    """Operator-entered card codes are malformed, duplicated or the wrong count."""
