"""
HomePoker - Table Engine for Home Games

Tracks a physical poker game played at a kitchen table:
- Texas Hold'em and 5-Card Stud betting rounds
- Dealer rotation, blinds and antes
- Side pots, refunds and showdown payouts
- FastAPI server for an operator UI

Usage:
    from homepoker.core import PokerTable, GameVariant, TableConfig
"""

__version__ = "0.1.0"

from homepoker.core.player import Player
from homepoker.core.rules import GameVariant, TableConfig
from homepoker.core.table import PokerTable

__all__ = [
    "Player",
    "GameVariant",
    "TableConfig",
    "PokerTable",
    "__version__",
]
