"""
Table rules, enums and constants.

Position rules for Hold'em follow standard tournament conventions:

1. Heads-up (2 players): Dealer posts small blind, non-dealer posts big blind.
   Preflop: Dealer acts first.

2. Three or more players: small blind is left of the dealer, big blind left of
   the small blind, and the seat left of the big blind acts first preflop.

3. Postflop, and on every Stud street after the first, action starts from the
   left of the dealer. Stud streets 2-5 start with the best showing hand.
"""

from collections import Counter
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar

from homepoker.core.card import Card


class GameVariant(Enum):
    """Supported poker variants."""
    TEXAS_HOLDEM = "texasHoldem"
    FIVE_CARD_STUD = "fiveCardStud"


class Street(Enum):
    """Betting rounds, tied to a dealing stage."""
    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    STREET1 = "street1"
    STREET2 = "street2"
    STREET3 = "street3"
    STREET4 = "street4"
    STREET5 = "street5"
    SHOWDOWN = "showdown"


class ActionType(Enum):
    """Possible player actions."""
    FOLD = "fold"
    CHECK = "check"
    CALL = "call"
    BET = "bet"
    RAISE = "raise"
    ALL_IN = "allIn"


class ActionCategory(Enum):
    BETTING = "betting"
    ADMIN = "admin"


class PlayerStatus(Enum):
    """Player states during a hand."""
    ACTIVE = "active"           # Still in the hand, can act
    FOLDED = "folded"           # Has folded
    ALL_IN = "allIn"            # All-in, no more actions
    SITTING_OUT = "sittingOut"  # Not dealt in


class HandPhase(Enum):
    """
    Where a hand is waiting.

    Values of the wait phases are the checkpoint tags an operator UI shows
    while the physical dealer does something at the table.
    """
    AWAITING_ACTION = "AWAITING_ACTION"
    AWAITING_DEAL_CONFIRM = "WAITING_FOR_DEAL_CONFIRM"
    AWAITING_COMMUNITY_CARDS = "WAITING_FOR_CARDS"
    AWAITING_STUD_FIRST = "WAITING_FOR_STUD_FIRST"
    AWAITING_STUD_CARD = "WAITING_FOR_STUD_CARD"
    SHOWDOWN = "SHOWDOWN"


STREET_ORDER: Dict[GameVariant, Tuple[Street, ...]] = {
    GameVariant.TEXAS_HOLDEM: (
        Street.PREFLOP, Street.FLOP, Street.TURN, Street.RIVER, Street.SHOWDOWN,
    ),
    GameVariant.FIVE_CARD_STUD: (
        Street.STREET1, Street.STREET2, Street.STREET3, Street.STREET4,
        Street.STREET5, Street.SHOWDOWN,
    ),
}

# Default table settings
DEFAULT_SMALL_BLIND = 1
DEFAULT_BIG_BLIND = 2
DEFAULT_STACK = 1000
MIN_PLAYERS = 2
HISTORY_LIMIT = 50

# Cards per dealing stage
HOLE_CARDS = 2
COMMUNITY_CARDS_BY_STREET = {
    Street.FLOP: 3,
    Street.TURN: 1,
    Street.RIVER: 1,
}
STUD_UP_CARDS = 4


@dataclass(frozen=True)
class TableConfig:
    """Forced bets for a table. Hold'em uses blinds, Stud uses the ante."""
    small_blind: Optional[int] = None
    big_blind: Optional[int] = None
    ante: Optional[int] = None

    def __post_init__(self):
        for name in ("small_blind", "big_blind", "ante"):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, int) or value < 0):
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
        if self.small_blind and self.big_blind and self.big_blind < self.small_blind:
            raise ValueError("big_blind must be at least small_blind")

    @property
    def has_blinds(self) -> bool:
        return bool(self.small_blind) and bool(self.big_blind)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def next_street(street: Street, variant: GameVariant) -> Street:
    """Return the street after ``street``; the last betting street leads to showdown."""
    order = STREET_ORDER[variant]
    if street not in order or street == Street.SHOWDOWN:
        return Street.SHOWDOWN
    return order[order.index(street) + 1]


def first_street(variant: GameVariant) -> Street:
    return STREET_ORDER[variant][0]


def street_number(street: Street) -> int:
    """1-based index of a Stud street ("street3" -> 3)."""
    return int(street.value.replace("street", ""))


Seated = TypeVar("Seated")


def sort_by_seat(players: Sequence[Seated]) -> List[Seated]:
    return sorted(players, key=lambda p: p.seat)


def build_seat_ring(players: Sequence[Seated], dealer_seat: int) -> List[Seated]:
    """
    Order players clockwise starting left of the dealer.

    The dealer (if present) ends up last. Works with any objects that carry a
    ``seat`` attribute.
    """
    ordered = sort_by_seat(players)
    start = next((i for i, p in enumerate(ordered) if p.seat > dealer_seat), 0)
    return ordered[start:] + ordered[:start]


def get_blind_positions(num_players: int, dealer_position: int) -> Tuple[int, int]:
    """
    Calculate small blind and big blind positions.

    In heads-up play, the dealer posts the small blind.

    Args:
        num_players: Number of players dealt in
        dealer_position: Index of the dealer among them (seat order)

    Returns:
        Tuple of (small_blind_position, big_blind_position)
    """
    if num_players < MIN_PLAYERS:
        raise ValueError("Need at least 2 players")

    if num_players == 2:
        sb_pos = dealer_position
    else:
        sb_pos = (dealer_position + 1) % num_players
    bb_pos = (sb_pos + 1) % num_players
    return sb_pos, bb_pos


def get_first_to_act_position(
    variant: GameVariant,
    num_players: int,
    dealer_position: int,
) -> int:
    """
    Get the position of the first player to act on the opening street.

    - Hold'em heads-up: dealer (small blind) acts first
    - Hold'em 3+: seat three positions clockwise of the dealer (left of BB)
    - Stud: seat immediately clockwise of the dealer
    """
    if variant == GameVariant.TEXAS_HOLDEM:
        if num_players == 2:
            return dealer_position
        return (dealer_position + 3) % num_players
    return (dealer_position + 1) % num_players


def showing_hand_key(codes: Sequence[str]) -> Tuple[Tuple[int, int], ...]:
    """
    Sort key for a partial Stud board of face-up cards.

    Groups of equal rank count first (quads > trips > two pair > pair), then
    rank. Straights and flushes do not count on a partial board.
    """
    counts = Counter(Card.from_string(c).rank for c in codes if c)
    groups = sorted(counts.items(), key=lambda rc: (rc[1], rc[0]), reverse=True)
    return tuple((count, int(rank)) for rank, count in groups)


def best_showing_player(
    order: Sequence[str],
    up_cards: Mapping[str, Sequence[str]],
) -> Optional[str]:
    """
    Pick the player with the best face-up cards.

    Args:
        order: Candidate player ids, clockwise from the dealer
        up_cards: Face-up codes per player

    Returns:
        The best showing player id; ties go to the first in ``order``.
    """
    best_id = None
    best_key = None
    for player_id in order:
        key = showing_hand_key(up_cards.get(player_id, ()))
        if best_key is None or key > best_key:
            best_id, best_key = player_id, key
    return best_id
