"""
Pytest configuration and shared fixtures for HomePoker tests.
"""

import random

import pytest
from homepoker.core.card import Card, Rank, Suit
from homepoker.core.player import Player
from homepoker.core.rules import GameVariant, TableConfig
from homepoker.core.table import create_table


def seat_players(stacks):
    """Players "a", "b", "c"... in seats 1, 2, 3... with the given stacks."""
    return [
        Player(player_id=chr(ord("a") + i), name=chr(ord("A") + i), seat=i + 1, stack=stack)
        for i, stack in enumerate(stacks)
    ]


@pytest.fixture
def rng():
    """Seeded random source for reproducible shuffles."""
    return random.Random(42)


@pytest.fixture
def make_table():
    """Factory for tables seated with players "a", "b", "c"..."""
    def _make(stacks=(1000, 1000, 1000), variant=GameVariant.TEXAS_HOLDEM, config=None):
        if config is None:
            if variant == GameVariant.TEXAS_HOLDEM:
                config = TableConfig(small_blind=10, big_blind=20)
            else:
                config = TableConfig(ante=5)
        return create_table("Test", variant, config, seat_players(stacks))
    return _make


@pytest.fixture
def holdem_table(make_table):
    """3-handed Hold'em, blinds 10/20, 1000 chips each."""
    return make_table()


@pytest.fixture
def heads_up_table(make_table):
    """Heads-up Hold'em, blinds 10/20, 1000 chips each."""
    return make_table(stacks=(1000, 1000))


@pytest.fixture
def stud_table(make_table):
    """3-handed 5-Card Stud, ante 5, 100 chips each."""
    return make_table(stacks=(100, 100, 100), variant=GameVariant.FIVE_CARD_STUD)


@pytest.fixture
def chips_in_play():
    """Stacks plus everything committed to the current hand."""
    def _total(table):
        stacks = sum(p.stack for p in table.players)
        if table.current_hand is None:
            return stacks
        return stacks + sum(table.current_hand.total_committed.values())
    return _total


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.KING, Suit.SPADES),
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.TEN, Suit.SPADES),
    ]


@pytest.fixture
def straight_flush():
    """Create a straight flush (9-high)."""
    return [
        Card(Rank.NINE, Suit.HEARTS),
        Card(Rank.EIGHT, Suit.HEARTS),
        Card(Rank.SEVEN, Suit.HEARTS),
        Card(Rank.SIX, Suit.HEARTS),
        Card(Rank.FIVE, Suit.HEARTS),
    ]


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.DIAMONDS),
        Card(Rank.FOUR, Suit.CLUBS),
        Card(Rank.FIVE, Suit.SPADES),
    ]
