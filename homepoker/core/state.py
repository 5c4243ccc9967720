"""
Immutable table and hand state.

A table is a single ``TableState`` snapshot. Every transition builds a new
snapshot with ``dataclasses.replace``; mapping fields are rebuilt, never
edited in place.
"""

from __future__ import annotations
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from homepoker.core.player import Player
from homepoker.core.rules import (
    ActionCategory, ActionType, GameVariant, HandPhase, Street, TableConfig,
    sort_by_seat,
)


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PlayerCard:
    """A card in front of a player. An empty code is an unknown Stud hole card."""
    code: str
    face_up: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "face_up": self.face_up}


@dataclass(frozen=True)
class PlayerHand:
    player_id: str
    cards: Tuple[PlayerCard, ...] = ()

    @property
    def known_codes(self) -> List[str]:
        return [c.code for c in self.cards if c.code]

    @property
    def up_codes(self) -> List[str]:
        return [c.code for c in self.cards if c.code and c.face_up]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "cards": [c.to_dict() for c in self.cards],
        }


@dataclass(frozen=True)
class Pot:
    """Represents a pot (main pot or side pot)."""
    amount: int = 0
    eligible_player_ids: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": self.amount, "eligible": list(self.eligible_player_ids)}


@dataclass(frozen=True)
class Action:
    """One entry of the append-only hand log."""
    player_id: str
    street: Street
    category: ActionCategory
    betting_type: Optional[ActionType] = None
    amount: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None
    action_id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.action_id,
            "player_id": self.player_id,
            "street": self.street.value,
            "category": self.category.value,
            "betting_type": self.betting_type.value if self.betting_type else None,
            "amount": self.amount,
            "metadata": self.metadata,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class HandState:
    """
    State of the hand in progress.

    ``per_player_committed`` holds chips put in on the current street only;
    ``total_committed`` holds every chip each player put in during the hand
    (antes included). Chips of closed streets live in ``pots``.
    """
    hand_number: int
    variant: GameVariant
    dealer_seat: int
    street: Street
    phase: HandPhase
    player_hands: Tuple[PlayerHand, ...]
    board: Tuple[str, ...] = ()
    pots: Tuple[Pot, ...] = ()
    current_bet: int = 0
    per_player_committed: Dict[str, int] = field(default_factory=dict)
    total_committed: Dict[str, int] = field(default_factory=dict)
    actions: Tuple[Action, ...] = ()
    active_player_id: Optional[str] = None
    deck: Tuple[str, ...] = ()
    min_raise: int = 1
    hand_id: str = field(default_factory=new_id)

    def update(self, **kwargs) -> HandState:
        return replace(self, **kwargs)

    @property
    def participant_ids(self) -> List[str]:
        """Players dealt into this hand."""
        return [ph.player_id for ph in self.player_hands]

    def hand_of(self, player_id: str) -> Optional[PlayerHand]:
        for ph in self.player_hands:
            if ph.player_id == player_id:
                return ph
        return None

    def committed(self, player_id: str) -> int:
        """Chips the player has put in on the current street."""
        return self.per_player_committed.get(player_id, 0)

    @property
    def street_total(self) -> int:
        return sum(self.per_player_committed.values())

    @property
    def pot_total(self) -> int:
        """All chips in the middle: settled pots plus this street's bets."""
        return sum(p.amount for p in self.pots) + self.street_total

    @property
    def betting_actions_this_street(self) -> List[Action]:
        return [
            a for a in self.actions
            if a.street == self.street and a.category == ActionCategory.BETTING
        ]

    @property
    def active_player_tag(self) -> str:
        """Single-field view of the phase: player id, wait tag, or "" at showdown."""
        if self.phase == HandPhase.AWAITING_ACTION:
            return self.active_player_id or ""
        if self.phase == HandPhase.SHOWDOWN:
            return ""
        return self.phase.value

    def to_dict(self, hide_cards: bool = False) -> Dict[str, Any]:
        return {
            "id": self.hand_id,
            "hand_number": self.hand_number,
            "variant": self.variant.value,
            "dealer_seat": self.dealer_seat,
            "street": self.street.value,
            "phase": self.phase.name,
            "active_player": self.active_player_tag,
            "board": list(self.board),
            "player_hands": [] if hide_cards else [ph.to_dict() for ph in self.player_hands],
            "pots": [p.to_dict() for p in self.pots],
            "pot_total": self.pot_total,
            "current_bet": self.current_bet,
            "per_player_committed": dict(self.per_player_committed),
            "total_committed": dict(self.total_committed),
            "actions": [a.to_dict() for a in self.actions],
            "min_raise": self.min_raise,
            "deck_remaining": len(self.deck),
        }


@dataclass(frozen=True)
class WinnerRecord:
    player_id: str
    pot_share: int
    hand_description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "pot_share": self.pot_share,
            "hand_description": self.hand_description,
        }


@dataclass(frozen=True)
class ShownHand:
    player_id: str
    cards: Tuple[str, ...]
    hand_description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "cards": list(self.cards),
            "hand_description": self.hand_description,
        }


@dataclass(frozen=True)
class HandSummary:
    """Historical record kept after a hand concludes."""
    hand_number: int
    variant: GameVariant
    dealer_seat: int
    winners: Tuple[WinnerRecord, ...]
    total_pot: int
    player_hands: Tuple[ShownHand, ...] = ()
    refunds: Dict[str, int] = field(default_factory=dict)
    summary_id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.summary_id,
            "hand_number": self.hand_number,
            "variant": self.variant.value,
            "dealer_seat": self.dealer_seat,
            "winners": [w.to_dict() for w in self.winners],
            "player_hands": [h.to_dict() for h in self.player_hands],
            "refunds": dict(self.refunds),
            "total_pot": self.total_pot,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class TableState:
    """One snapshot of a whole table."""
    name: str
    variant: GameVariant
    config: TableConfig
    players: Tuple[Player, ...] = ()
    current_hand: Optional[HandState] = None
    hand_history: Tuple[HandSummary, ...] = ()
    table_id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def update(self, **kwargs) -> TableState:
        """Copy with changes; bumps ``updated_at``."""
        kwargs.setdefault("updated_at", utcnow())
        return replace(self, **kwargs)

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def participants(self) -> List[Player]:
        """Players dealt into the current hand, in seat order."""
        if self.current_hand is None:
            return []
        ids = set(self.current_hand.participant_ids)
        return sort_by_seat([p for p in self.players if p.player_id in ids])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.table_id,
            "name": self.name,
            "variant": self.variant.value,
            "config": self.config.to_dict(),
            "players": [p.to_dict() for p in self.players],
            "current_hand": self.current_hand.to_dict() if self.current_hand else None,
            "hand_history": [h.to_dict() for h in self.hand_history],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


def replace_players(players: Tuple[Player, ...], changed: List[Player]) -> Tuple[Player, ...]:
    """Swap in changed players by id, keeping order and untouched references."""
    by_id = {p.player_id: p for p in changed}
    return tuple(by_id.get(p.player_id, p) for p in players)
