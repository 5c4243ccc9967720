"""
Player record for a home-game table.

Players are immutable; every change produces a new object through
``Player.update``. Keeping the old object untouched lets callers compare by
identity to detect no-ops and lets undo restore earlier snapshots.
"""

from __future__ import annotations
from typing import Any, Dict
from dataclasses import dataclass, replace

from homepoker.core.rules import PlayerStatus


@dataclass(frozen=True)
class Player:
    """
    A player seated at the table.

    Attributes:
        player_id: Unique identifier for the player
        name: Display name
        seat: Seat number (unique, positive, clockwise order)
        stack: Current chip count
        is_sitting_out: Player asked to skip hands
        status: Player state within the current hand
        wins: Number of hands in which the player won at least one pot
    """
    player_id: str
    name: str
    seat: int
    stack: int
    is_sitting_out: bool = False
    status: PlayerStatus = PlayerStatus.ACTIVE
    wins: int = 0

    def update(self, **kwargs) -> Player:
        return replace(self, **kwargs)

    @property
    def is_active(self) -> bool:
        """Check if player can still act in the current hand."""
        return self.status == PlayerStatus.ACTIVE

    @property
    def is_in_hand(self) -> bool:
        """Still contesting the pot: not folded and not sitting out. Includes all-in."""
        return not self.is_sitting_out and self.status in (
            PlayerStatus.ACTIVE, PlayerStatus.ALL_IN,
        )

    @property
    def can_be_dealt_in(self) -> bool:
        return self.stack > 0 and not self.is_sitting_out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.player_id,
            "name": self.name,
            "seat": self.seat,
            "stack": self.stack,
            "is_sitting_out": self.is_sitting_out,
            "status": self.status.value,
            "wins": self.wins,
        }

    def __str__(self) -> str:
        return f"Player {self.name} (seat {self.seat}) ${self.stack}"
