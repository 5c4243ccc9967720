"""
Hand settlement.

Two ways a hand ends:
- Everyone but one player folds: the survivor takes every pot they are
  eligible for, uncalled chips go back to their owners.
- Showdown: each pot is awarded to the best hand among its eligible players,
  tied pots are split with odd chips going clockwise from the dealer.

Both paths run the pot calculator over whole-hand commitments, credit stacks
and wins, append a ``HandSummary`` to the table history and clear the hand.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from homepoker.core.hand import EvaluationResult, Evaluator, HandEvaluator
from homepoker.core.payouts import apply_payouts_to_players, split_pot
from homepoker.core.player import Player
from homepoker.core.pots import PlayerCommitment, PotResult, calculate_pots
from homepoker.core.rules import GameVariant, HandPhase, build_seat_ring
from homepoker.core.state import (
    HandState, HandSummary, ShownHand, TableState, WinnerRecord,
)


logger = logging.getLogger(__name__)

FOLD_WIN_DESCRIPTION = "Won by fold"


@dataclass
class ShowdownOutcome:
    """Chip distribution decided at showdown."""
    pot_result: PotResult
    evaluation: EvaluationResult
    winnings: Dict[str, int] = field(default_factory=dict)

    @property
    def shares(self) -> Dict[str, int]:
        """Pot winnings plus refunds per player."""
        shares = dict(self.winnings)
        for pid, amount in self.pot_result.refunds.items():
            shares[pid] = shares.get(pid, 0) + amount
        return shares

    @property
    def winner_ids(self) -> List[str]:
        return [pid for pid, amount in self.winnings.items() if amount > 0]


def hand_commitments(hand: HandState, participants: Sequence[Player]) -> List[PlayerCommitment]:
    return [
        PlayerCommitment(
            player_id=p.player_id,
            amount=hand.total_committed.get(p.player_id, 0),
            is_folded=not p.is_in_hand,
        )
        for p in participants
    ]


def _finish_hand(
    table: TableState,
    shares: Mapping[str, int],
    winner_ids: Sequence[str],
    winners: Sequence[WinnerRecord],
    refunds: Mapping[str, int],
    shown: Sequence[ShownHand] = (),
) -> TableState:
    hand = table.current_hand
    players = apply_payouts_to_players(table.players, shares, winner_ids)
    summary = HandSummary(
        hand_number=hand.hand_number,
        variant=hand.variant,
        dealer_seat=hand.dealer_seat,
        winners=tuple(winners),
        total_pot=sum(hand.total_committed.values()),
        player_hands=tuple(shown),
        refunds=dict(refunds),
    )
    return table.update(
        players=tuple(players),
        current_hand=None,
        hand_history=table.hand_history + (summary,),
    )


def settle_fold_out(table: TableState) -> TableState:
    """
    Settle a hand that everyone but (at most) one player folded.

    The survivor wins each pot they are eligible for. Everything else the
    pot calculator hands back as refunds goes to its owner, so the survivor
    never collects more than the other players actually matched.
    """
    hand = table.current_hand
    participants = table.participants()
    survivors = [p for p in participants if p.is_in_hand]
    survivor = survivors[0] if survivors else None

    result = calculate_pots(hand_commitments(hand, participants))
    won = 0
    for pot in result.pots:
        if survivor is not None and survivor.player_id in pot.eligible_player_ids:
            won += pot.amount
        else:
            logger.error(f"Hand #{hand.hand_number}: pot {pot.amount} has no survivor, left unpaid")

    shares = dict(result.refunds)
    winners = []
    if survivor is not None:
        shares[survivor.player_id] = shares.get(survivor.player_id, 0) + won
        winners.append(WinnerRecord(survivor.player_id, won, FOLD_WIN_DESCRIPTION))
        logger.info(f"Hand #{hand.hand_number}: {survivor.name} wins {won} by fold")

    return _finish_hand(
        table,
        shares=shares,
        winner_ids=[survivor.player_id] if survivor is not None else [],
        winners=winners,
        refunds=result.refunds,
    )


def showdown_card_sets(
    hand: HandState,
    contenders: Sequence[Player],
) -> Tuple[Dict[str, List[str]], Tuple[str, ...]]:
    """
    Cards each contender plays, plus the shared board.

    Hold'em: hole cards with the five community cards.
    Stud: every known card of the player (hole card once revealed, up cards).
    """
    card_sets = {}
    for player in contenders:
        player_hand = hand.hand_of(player.player_id)
        card_sets[player.player_id] = player_hand.known_codes if player_hand else []

    board = hand.board if hand.variant == GameVariant.TEXAS_HOLDEM else ()
    return card_sets, tuple(board)


def _evaluate(
    evaluator: Evaluator,
    card_sets: Mapping[str, Sequence[str]],
    board: Sequence[str],
) -> EvaluationResult:
    try:
        return evaluator.evaluate(card_sets, board)
    except Exception:
        logger.exception(f"Hand evaluator failed on {dict(card_sets)}")
        return EvaluationResult()


def compute_showdown_shares(
    table: TableState,
    evaluator: Evaluator,
) -> Optional[ShowdownOutcome]:
    """
    Decide who gets which chips at showdown.

    Every pot goes to the best hand among its eligible players. A pot with a
    single eligible player is theirs without evaluation.

    Returns:
        ShowdownOutcome, or None if the hands could not be evaluated
    """
    hand = table.current_hand
    participants = table.participants()
    contenders = [p for p in participants if p.is_in_hand]
    card_sets, board = showdown_card_sets(hand, contenders)

    overall = _evaluate(evaluator, card_sets, board)
    if not overall.winners:
        return None

    result = calculate_pots(hand_commitments(hand, participants))
    ring = [p.player_id for p in build_seat_ring(participants, hand.dealer_seat)]
    winnings: Dict[str, int] = {}

    for pot in result.pots:
        eligible = [pid for pid in pot.eligible_player_ids if pid in card_sets]
        if len(eligible) == 1:
            pot_winners = eligible
        else:
            pot_eval = _evaluate(evaluator, {pid: card_sets[pid] for pid in eligible}, board)
            if not pot_eval.winners:
                return None
            pot_winners = pot_eval.winner_ids

        for pid, amount in split_pot(pot.amount, pot_winners, ring).items():
            winnings[pid] = winnings.get(pid, 0) + amount

    return ShowdownOutcome(pot_result=result, evaluation=overall, winnings=winnings)


def settle_showdown(table: TableState, evaluator: Optional[Evaluator] = None) -> TableState:
    """
    Award the pots of a hand that reached showdown.

    If the evaluator cannot produce a winner (missing or duplicate cards),
    the same table is returned and the hand stays at showdown so the
    operator can fix the cards.

    Args:
        table: Table whose hand is at showdown
        evaluator: Hand evaluator (defaults to ``HandEvaluator``)

    Returns:
        New table with stacks credited and the hand moved to history
    """
    hand = table.current_hand
    if hand is None or hand.phase != HandPhase.SHOWDOWN:
        return table

    outcome = compute_showdown_shares(table, evaluator or HandEvaluator())
    if outcome is None:
        logger.warning(f"Hand #{hand.hand_number}: showdown could not be evaluated")
        return table

    descriptions = {
        pid: evaluated.description
        for pid, evaluated in outcome.evaluation.all_hands.items()
    }
    ring = [p.player_id for p in build_seat_ring(table.participants(), hand.dealer_seat)]
    winner_ids = sorted(outcome.winner_ids, key=lambda pid: ring.index(pid) if pid in ring else len(ring))

    winners = [
        WinnerRecord(pid, outcome.winnings[pid], descriptions.get(pid, ""))
        for pid in winner_ids
    ]
    if not winners:
        winners = [
            WinnerRecord(w.player_id, 0, w.description)
            for w in outcome.evaluation.winners
        ]

    shown = [
        ShownHand(pid, evaluated.cards, evaluated.description)
        for pid, evaluated in outcome.evaluation.all_hands.items()
    ]

    for record in winners:
        logger.info(
            f"Hand #{hand.hand_number}: {record.player_id} wins {record.pot_share} "
            f"with {record.hand_description}"
        )

    return _finish_hand(
        table,
        shares=outcome.shares,
        winner_ids=winner_ids,
        winners=winners,
        refunds=outcome.pot_result.refunds,
        shown=shown,
    )
