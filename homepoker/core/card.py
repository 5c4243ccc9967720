"""
Cards and the 52-card deck.

Cards travel through the engine as two-character codes ("As", "Td", "2c").
The Card class parses a code into rank and suit for validation and hand
evaluation.
"""

from __future__ import annotations
import random
from typing import Iterable, List, Optional, Tuple
from enum import IntEnum

from homepoker.core.errors import InsufficientCards


class Suit(IntEnum):
    """Card suits with integer values for fast comparison."""
    CLUBS = 0     # ♣
    DIAMONDS = 1  # ♦
    HEARTS = 2    # ♥
    SPADES = 3    # ♠


class Rank(IntEnum):
    """Card ranks from 2 (lowest) to Ace (highest)."""
    TWO = 0
    THREE = 1
    FOUR = 2
    FIVE = 3
    SIX = 4
    SEVEN = 5
    EIGHT = 6
    NINE = 7
    TEN = 8
    JACK = 9
    QUEEN = 10
    KING = 11
    ACE = 12


RANKS = "23456789TJQKA"
SUITS = "shdc"  # spades, hearts, diamonds, clubs

SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}

CHAR_TO_RANK = {ch: Rank(i) for i, ch in enumerate(RANKS)}
CHAR_TO_SUIT = {
    "c": Suit.CLUBS,
    "d": Suit.DIAMONDS,
    "h": Suit.HEARTS,
    "s": Suit.SPADES,
}
SUIT_TO_CHAR = {v: k for k, v in CHAR_TO_SUIT.items()}


class Card:
    """
    A playing card represented as (rank, suit).

    Usage:
        card = Card.from_string("As")
        card.code  # "As"
    """

    __slots__ = ("rank", "suit")

    def __init__(self, rank: Rank, suit: Suit):
        self.rank = Rank(rank)
        self.suit = Suit(suit)

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from a two-character code.

        The rank is case-insensitive ("as" == "As"); "10" is accepted for ten.

        Raises:
            ValueError: If the code is not a valid card.
        """
        s = s.strip()
        if s.startswith("10"):
            s = "T" + s[2:]
        if len(s) != 2:
            raise ValueError(f"Invalid card string: {s!r}")

        rank_char, suit_char = s[0].upper(), s[1].lower()
        if rank_char not in CHAR_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_char}")
        if suit_char not in CHAR_TO_SUIT:
            raise ValueError(f"Invalid suit: {suit_char}")

        return cls(CHAR_TO_RANK[rank_char], CHAR_TO_SUIT[suit_char])

    @property
    def code(self) -> str:
        """Canonical code like 'As', 'Td'."""
        return f"{RANKS[self.rank]}{SUIT_TO_CHAR[self.suit]}"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Card):
            return self.rank == other.rank and self.suit == other.suit
        return False

    def __hash__(self) -> int:
        return int(self.rank) * 4 + int(self.suit)

    def __repr__(self) -> str:
        return f"Card({self.code})"

    def __str__(self) -> str:
        return f"{RANKS[self.rank]}{SUIT_SYMBOLS[self.suit]}"


def is_valid_code(code: str) -> bool:
    """Check whether a string is a canonical card code."""
    try:
        return Card.from_string(code).code == code
    except ValueError:
        return False


def normalize_codes(codes: Iterable[str]) -> List[str]:
    """Parse codes and return them in canonical form ("ah" -> "Ah")."""
    return [Card.from_string(c).code for c in codes]


def create_deck() -> List[str]:
    """Return the 52 card codes in a fixed order (suit-major)."""
    return [rank + suit for suit in SUITS for rank in RANKS]


def shuffle_deck(deck: List[str], rng: Optional[random.Random] = None) -> List[str]:
    """
    Return a shuffled copy of the deck.

    The input list is not modified. Pass a seeded ``random.Random`` for
    reproducible shuffles.
    """
    shuffled = list(deck)
    (rng or random).shuffle(shuffled)
    return shuffled


def deal_cards(deck: List[str], count: int) -> Tuple[List[str], List[str]]:
    """
    Deal cards from the top of the deck.

    Returns:
        Tuple of (dealt cards, remaining deck)

    Raises:
        InsufficientCards: If not enough cards remain.
    """
    if count > len(deck):
        raise InsufficientCards(f"Cannot deal {count} cards, only {len(deck)} remain")
    return list(deck[:count]), list(deck[count:])
