"""
Tests for hand evaluation.
"""

import pytest
from homepoker.core.card import Card, Rank, Suit
from homepoker.core.hand import HandEvaluator, HandRank, describe, evaluate_hand


def cards(*codes):
    return [Card.from_string(c) for c in codes]


class TestHandRanking:
    """Tests for hand ranking."""

    def test_royal_flush(self, royal_flush):
        """Test royal flush recognition."""
        (hand_type, _), _ = evaluate_hand(royal_flush)
        assert hand_type == HandRank.ROYAL_FLUSH

    def test_straight_flush(self, straight_flush):
        (hand_type, ranks), _ = evaluate_hand(straight_flush)
        assert hand_type == HandRank.STRAIGHT_FLUSH
        assert ranks == (Rank.NINE,)

    def test_wheel_is_five_high(self, wheel_straight):
        """Test that A-2-3-4-5 is a straight with the Ace low."""
        score, _ = evaluate_hand(wheel_straight)
        assert score[0] == HandRank.STRAIGHT
        assert describe(score) == "Straight, Five high (Wheel)"

    @pytest.mark.parametrize("codes,expected", [
        (("Ah", "Ad", "Ac", "As", "Ks"), HandRank.FOUR_OF_A_KIND),
        (("Kh", "Kd", "Kc", "2s", "2h"), HandRank.FULL_HOUSE),
        (("2h", "7h", "9h", "Jh", "Kh"), HandRank.FLUSH),
        (("9c", "Td", "Jh", "Qs", "Kc"), HandRank.STRAIGHT),
        (("7c", "7d", "7h", "2s", "Kc"), HandRank.THREE_OF_A_KIND),
        (("7c", "7d", "2h", "2s", "Kc"), HandRank.TWO_PAIR),
        (("7c", "7d", "3h", "2s", "Kc"), HandRank.ONE_PAIR),
        (("7c", "9d", "3h", "2s", "Kc"), HandRank.HIGH_CARD),
    ])
    def test_categories(self, codes, expected):
        (hand_type, _), _ = evaluate_hand(cards(*codes))
        assert hand_type == expected

    def test_best_five_of_seven(self):
        """Test that the best 5 of 7 cards are picked."""
        score, best = evaluate_hand(cards("As", "Ks", "2d", "Qs", "Js", "Ts", "3c"))
        assert score[0] == HandRank.ROYAL_FLUSH
        assert {c.code for c in best} == {"As", "Ks", "Qs", "Js", "Ts"}

    def test_kicker_decides(self):
        high, _ = evaluate_hand(cards("Ac", "Ad", "Kh", "7s", "3c"))
        low, _ = evaluate_hand(cards("Ah", "As", "Qh", "7d", "3d"))
        assert high > low

    def test_too_few_cards(self):
        with pytest.raises(ValueError):
            evaluate_hand(cards("As", "Ks", "Qs", "Js"))

    def test_duplicate_cards(self):
        with pytest.raises(ValueError):
            evaluate_hand(cards("As", "As", "Qs", "Js", "Ts"))


class TestDescriptions:
    """Tests for readable hand descriptions."""

    @pytest.mark.parametrize("codes,text", [
        (("As", "Ks", "Qs", "Js", "Ts"), "Royal Flush"),
        (("6h", "6d", "6c", "Ks", "Kh"), "Full House, Sixes full of Kings"),
        (("Qh", "Qd", "5h", "5s", "2c"), "Two Pair, Queens and Fives"),
        (("Ah", "Ad", "9h", "5s", "2c"), "Pair of Aces"),
        (("Ah", "Jd", "9h", "5s", "2c"), "High Card, Ace"),
    ])
    def test_describe(self, codes, text):
        score, _ = evaluate_hand(cards(*codes))
        assert describe(score) == text


class TestHandEvaluator:
    """Tests for the default evaluator used at showdown."""

    BOARD = ["2c", "7d", "9h", "Js", "3s"]

    def test_single_winner(self):
        result = HandEvaluator().evaluate(
            {"a": ["As", "Ah"], "b": ["Kd", "Kc"]}, self.BOARD,
        )
        assert result.winner_ids == ["a"]
        assert result.winners[0].description == "Pair of Aces"
        assert result.all_hands["b"].description == "Pair of Kings"
        assert result.all_hands["b"].cards == ("Kd", "Kc")

    def test_tie(self):
        result = HandEvaluator().evaluate(
            {"a": ["2d", "3d"], "b": ["2h", "3h"]},
            ["As", "Ks", "Qs", "Js", "Ts"],
        )
        assert sorted(result.winner_ids) == ["a", "b"]

    def test_stud_five_cards_no_board(self):
        result = HandEvaluator().evaluate({
            "a": ["Kc", "Kd", "Qd", "3s", "4c"],
            "b": ["9h", "2c", "2d", "7s", "8s"],
        })
        assert result.winner_ids == ["a"]

    def test_malformed_input_gives_empty_result(self):
        """Test that bad input does not raise."""
        evaluator = HandEvaluator()
        assert evaluator.evaluate({"a": ["Zz", "Ah"]}, self.BOARD).winners == []
        assert evaluator.evaluate({"a": ["As"]}, self.BOARD[:3]).winners == []
        assert evaluator.evaluate({}, self.BOARD).winners == []

    def test_card_in_two_hands_gives_empty_result(self):
        result = HandEvaluator().evaluate(
            {"a": ["As", "Ah"], "b": ["As", "Kc"]}, self.BOARD,
        )
        assert result.winners == []
