"""
Hand evaluation.

Settlement talks to an evaluator through the ``Evaluator`` protocol: given
each contender's cards (and the board), return the winner(s) and a readable
description of every hand. ``HandEvaluator`` is the default implementation;
it picks the best 5-card hand out of 5-7 cards.

Hand Rankings (best to worst):
1. Royal Flush
2. Straight Flush
3. Four of a Kind
4. Full House
5. Flush
6. Straight
7. Three of a Kind
8. Two Pair
9. One Pair
10. High Card

Note: Ace can be low in A-2-3-4-5 straight (wheel).
"""

from __future__ import annotations
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from itertools import combinations
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from homepoker.core.card import Card, Rank


logger = logging.getLogger(__name__)


class HandRank(IntEnum):
    """Hand categories; a higher value beats a lower one."""
    ROYAL_FLUSH = 10
    STRAIGHT_FLUSH = 9
    FOUR_OF_A_KIND = 8
    FULL_HOUSE = 7
    FLUSH = 6
    STRAIGHT = 5
    THREE_OF_A_KIND = 4
    TWO_PAIR = 3
    ONE_PAIR = 2
    HIGH_CARD = 1


RANK_NAMES = {
    Rank.TWO: "Two", Rank.THREE: "Three", Rank.FOUR: "Four",
    Rank.FIVE: "Five", Rank.SIX: "Six", Rank.SEVEN: "Seven",
    Rank.EIGHT: "Eight", Rank.NINE: "Nine", Rank.TEN: "Ten",
    Rank.JACK: "Jack", Rank.QUEEN: "Queen", Rank.KING: "King",
    Rank.ACE: "Ace",
}

HandScore = Tuple[HandRank, Tuple[int, ...]]


def _plural(rank: int) -> str:
    name = RANK_NAMES[Rank(rank)]
    return name + ("es" if name.endswith("x") else "s")


def _straight_high(ranks: Sequence[int]) -> Optional[int]:
    """High card of a straight among exactly five distinct ranks, or None."""
    unique = sorted(set(ranks), reverse=True)
    if len(unique) != 5:
        return None
    if unique[0] - unique[4] == 4:
        return unique[0]
    if unique == [Rank.ACE, Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO]:
        return int(Rank.FIVE)
    return None


def _score_five(cards: Sequence[Card]) -> HandScore:
    """Score exactly five cards; compare scores with plain tuple ordering."""
    ranks = sorted((int(c.rank) for c in cards), reverse=True)
    counts = Counter(ranks)
    groups = sorted(counts.items(), key=lambda rc: (rc[1], rc[0]), reverse=True)
    by_group = tuple(rank for rank, _ in groups)
    shape = [count for _, count in groups]

    is_flush = len({c.suit for c in cards}) == 1
    high = _straight_high(ranks)

    if high is not None and is_flush:
        if high == Rank.ACE:
            return HandRank.ROYAL_FLUSH, (high,)
        return HandRank.STRAIGHT_FLUSH, (high,)
    if shape == [4, 1]:
        return HandRank.FOUR_OF_A_KIND, by_group
    if shape == [3, 2]:
        return HandRank.FULL_HOUSE, by_group
    if is_flush:
        return HandRank.FLUSH, tuple(ranks)
    if high is not None:
        return HandRank.STRAIGHT, (high,)
    if shape == [3, 1, 1]:
        return HandRank.THREE_OF_A_KIND, by_group
    if shape == [2, 2, 1]:
        return HandRank.TWO_PAIR, by_group
    if shape == [2, 1, 1, 1]:
        return HandRank.ONE_PAIR, by_group
    return HandRank.HIGH_CARD, tuple(ranks)


def evaluate_hand(cards: Sequence[Card]) -> Tuple[HandScore, List[Card]]:
    """
    Find the best 5-card hand.

    Args:
        cards: 5-7 distinct cards

    Returns:
        Tuple of (score, best five cards). Higher scores win.

    Raises:
        ValueError: If not 5-7 cards, or a card appears twice
    """
    if len(cards) < 5 or len(cards) > 7:
        raise ValueError(f"Need 5-7 cards, got {len(cards)}")
    if len(set(cards)) != len(cards):
        raise ValueError(f"Duplicate cards in {list(cards)}")

    best_score = None
    best_cards: List[Card] = []
    for combo in combinations(cards, 5):
        score = _score_five(combo)
        if best_score is None or score > best_score:
            best_score, best_cards = score, list(combo)
    return best_score, best_cards


def describe(score: HandScore) -> str:
    """Human-readable description of a scored hand."""
    hand_type, ranks = score
    if hand_type == HandRank.ROYAL_FLUSH:
        return "Royal Flush"
    if hand_type == HandRank.STRAIGHT_FLUSH:
        return f"Straight Flush, {RANK_NAMES[Rank(ranks[0])]} high"
    if hand_type == HandRank.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_plural(ranks[0])}"
    if hand_type == HandRank.FULL_HOUSE:
        return f"Full House, {_plural(ranks[0])} full of {_plural(ranks[1])}"
    if hand_type == HandRank.FLUSH:
        return f"Flush, {RANK_NAMES[Rank(ranks[0])]} high"
    if hand_type == HandRank.STRAIGHT:
        if ranks[0] == Rank.FIVE:
            return "Straight, Five high (Wheel)"
        return f"Straight, {RANK_NAMES[Rank(ranks[0])]} high"
    if hand_type == HandRank.THREE_OF_A_KIND:
        return f"Three of a Kind, {_plural(ranks[0])}"
    if hand_type == HandRank.TWO_PAIR:
        return f"Two Pair, {_plural(ranks[0])} and {_plural(ranks[1])}"
    if hand_type == HandRank.ONE_PAIR:
        return f"Pair of {_plural(ranks[0])}"
    return f"High Card, {RANK_NAMES[Rank(ranks[0])]}"


@dataclass(frozen=True)
class HandWinner:
    player_id: str
    description: str


@dataclass(frozen=True)
class EvaluatedHand:
    cards: Tuple[str, ...]
    description: str


@dataclass
class EvaluationResult:
    """Winners (ties possible) and a description of every evaluated hand."""
    winners: List[HandWinner] = field(default_factory=list)
    all_hands: Dict[str, EvaluatedHand] = field(default_factory=dict)

    @property
    def winner_ids(self) -> List[str]:
        return [w.player_id for w in self.winners]


class Evaluator(Protocol):
    def evaluate(
        self,
        card_sets: Mapping[str, Sequence[str]],
        board: Sequence[str] = (),
    ) -> EvaluationResult:
        ...


class HandEvaluator:
    """
    Default evaluator.

    Usage:
        result = HandEvaluator().evaluate({"a": ["As", "Ah"], "b": ["Kd", "Kc"]},
                                          ["2c", "7d", "9h", "Js", "3s"])
        result.winner_ids  # ["a"]

    Malformed input (bad codes, duplicates, wrong card count) gives an empty
    result instead of an exception.
    """

    def evaluate(
        self,
        card_sets: Mapping[str, Sequence[str]],
        board: Sequence[str] = (),
    ) -> EvaluationResult:
        try:
            board_cards = [Card.from_string(c) for c in board]
            seen = set(board_cards)
            scores: Dict[str, HandScore] = {}
            for player_id, codes in card_sets.items():
                own = [Card.from_string(c) for c in codes]
                if seen.intersection(own):
                    raise ValueError(f"Card dealt twice in {player_id}'s hand")
                seen.update(own)
                scores[player_id], _ = evaluate_hand(own + board_cards)
        except ValueError as e:
            logger.warning(f"Cannot evaluate hands {dict(card_sets)} board={list(board)}: {e}")
            return EvaluationResult()

        if not scores:
            return EvaluationResult()

        best = max(scores.values())
        return EvaluationResult(
            winners=[
                HandWinner(pid, describe(score))
                for pid, score in scores.items() if score == best
            ],
            all_hands={
                pid: EvaluatedHand(cards=tuple(card_sets[pid]), description=describe(score))
                for pid, score in scores.items()
            },
        )
