"""
Tests for cards and the deck.
"""

import random

import pytest
from homepoker.core.card import (
    Card, Rank, Suit, create_deck, deal_cards, is_valid_code, normalize_codes,
    shuffle_deck,
)
from homepoker.core.errors import InsufficientCards


class TestCard:
    """Tests for Card parsing."""

    def test_from_string(self):
        """Test parsing a two-character code."""
        card = Card.from_string("As")
        assert card.rank == Rank.ACE
        assert card.suit == Suit.SPADES
        assert card.code == "As"

    def test_ten_spelled_out(self):
        """Test that "10" is accepted for ten."""
        assert Card.from_string("10h").code == "Th"

    def test_rank_case_insensitive(self):
        assert Card.from_string("kd").code == "Kd"

    @pytest.mark.parametrize("code", ["", "A", "Ax", "1s", "AsK", "Zz"])
    def test_invalid_codes(self, code):
        """Test that malformed codes raise ValueError."""
        with pytest.raises(ValueError):
            Card.from_string(code)

    def test_equality_and_hash(self):
        assert Card.from_string("Qc") == Card(Rank.QUEEN, Suit.CLUBS)
        assert len({Card.from_string("Qc"), Card.from_string("qc")}) == 1

    def test_is_valid_code(self):
        assert is_valid_code("Td")
        assert not is_valid_code("td")
        assert not is_valid_code("Xd")

    def test_normalize_codes(self):
        assert normalize_codes(["ah", "10c", "2S"]) == ["Ah", "Tc", "2s"]


class TestDeck:
    """Tests for deck creation, shuffling and dealing."""

    def test_deck_has_52_unique_cards(self):
        deck = create_deck()
        assert len(deck) == 52
        assert len(set(deck)) == 52
        assert all(is_valid_code(code) for code in deck)

    def test_deck_order_is_fixed(self):
        assert create_deck() == create_deck()
        assert create_deck()[:2] == ["2s", "3s"]

    def test_shuffle_does_not_modify_input(self):
        deck = create_deck()
        shuffled = shuffle_deck(deck, random.Random(1))
        assert deck == create_deck()
        assert sorted(shuffled) == sorted(deck)

    def test_seeded_shuffle_is_reproducible(self):
        first = shuffle_deck(create_deck(), random.Random(7))
        second = shuffle_deck(create_deck(), random.Random(7))
        assert first == second

    def test_deal_cards(self):
        deck = create_deck()
        dealt, remaining = deal_cards(deck, 5)
        assert dealt == deck[:5]
        assert remaining == deck[5:]
        assert len(deck) == 52

    def test_deal_too_many(self):
        """Test dealing more cards than remain."""
        with pytest.raises(InsufficientCards):
            deal_cards(["As", "Kd"], 3)
