"""
Betting State Machine.

This module applies player actions to an immutable ``TableState``:
- Player actions (fold, check, call, bet, raise, all-in)
- Turn order, skipping folded and all-in players
- Betting round completion and street progression
- Win by fold (settled through the pot calculator)

A hand is always in exactly one phase: waiting for a player's action,
waiting for the dealer (deal confirmation, community cards, Stud up cards),
or at showdown. A concluded hand is removed from the table.

Every function returns a new snapshot; the input table is never modified.
"""

from __future__ import annotations
import logging
from typing import Optional, Sequence, Tuple, Union

from homepoker.core.errors import InvalidAction
from homepoker.core.player import Player
from homepoker.core.rules import (
    ActionCategory, ActionType, GameVariant, HandPhase, PlayerStatus, Street,
    next_street, sort_by_seat,
)
from homepoker.core.showdown import settle_fold_out
from homepoker.core.state import Action, HandState, Pot, TableState, replace_players


logger = logging.getLogger(__name__)


def base_min_raise(table: TableState) -> int:
    return table.config.big_blind or 1


def is_round_complete(hand: HandState, players: Sequence[Player]) -> bool:
    """
    Check if the current betting round is complete.

    All active players must have:
    1. Matched the current bet
    2. Acted at least once this street (posting a blind is not acting, so the
       big blind still gets the option preflop)
    and at least one active player must exist.
    """
    active_players = [p for p in players if p.is_active]
    if not active_players:
        return False

    acted = {a.player_id for a in hand.betting_actions_this_street}
    for player in active_players:
        if hand.committed(player.player_id) != hand.current_bet:
            return False
        if player.player_id not in acted:
            return False
    return True


def next_to_act(players: Sequence[Player], current_player_id: str) -> Optional[Player]:
    """
    Find the next player clockwise who can still act.

    Folded and all-in players are skipped. Returns None after one full cycle
    without finding anyone.
    """
    ordered = sort_by_seat(players)
    ids = [p.player_id for p in ordered]
    start = ids.index(current_player_id) if current_player_id in ids else -1

    for step in range(1, len(ordered) + 1):
        candidate = ordered[(start + step) % len(ordered)]
        if candidate.player_id == current_player_id:
            break
        if candidate.is_active and not candidate.is_sitting_out:
            return candidate
    return None


def close_street(table: TableState) -> TableState:
    """
    End the current betting round and advance to the next street.

    This street's chips are added to the running main pot, street commitments
    reset, and the hand waits for the next cards (or goes to showdown after
    the last street).
    """
    hand = table.current_hand
    street_total = hand.street_total
    pots = list(hand.pots)

    if pots:
        pots[0] = Pot(
            amount=pots[0].amount + street_total,
            eligible_player_ids=pots[0].eligible_player_ids,
        )
    elif street_total > 0:
        in_hand = tuple(p.player_id for p in table.participants() if p.is_in_hand)
        pots = [Pot(amount=street_total, eligible_player_ids=in_hand)]

    upcoming = next_street(hand.street, hand.variant)
    if upcoming == Street.SHOWDOWN:
        phase = HandPhase.SHOWDOWN
    elif hand.variant == GameVariant.TEXAS_HOLDEM:
        phase = HandPhase.AWAITING_COMMUNITY_CARDS
    else:
        phase = HandPhase.AWAITING_STUD_CARD

    logger.info(
        f"Hand #{hand.hand_number}: {hand.street.value} closed "
        f"(+{street_total}, pot {sum(p.amount for p in pots)}), next {upcoming.value}"
    )

    return table.update(current_hand=hand.update(
        street=upcoming,
        phase=phase,
        active_player_id=None,
        pots=tuple(pots),
        per_player_committed={},
        current_bet=0,
        min_raise=base_min_raise(table),
    ))


def open_betting(table: TableState, order: Sequence[Player]) -> TableState:
    """
    Start (or skip) a betting round.

    ``order`` lists the hand's players starting with the seat that acts first;
    the first active one gets the action. When nobody can act, or a single
    active player has nothing to call, the street closes right away and the
    remaining cards are run out.
    """
    hand = table.current_hand
    actives = [p for p in order if p.is_active]

    if not actives or (
        len(actives) == 1 and hand.committed(actives[0].player_id) >= hand.current_bet
    ):
        logger.info(f"Hand #{hand.hand_number}: no betting on {hand.street.value}")
        return close_street(table)

    return table.update(current_hand=hand.update(
        phase=HandPhase.AWAITING_ACTION,
        active_player_id=actives[0].player_id,
    ))


def _parse_action_type(action_type: Union[ActionType, str]) -> ActionType:
    try:
        return ActionType(action_type)
    except ValueError:
        raise InvalidAction(f"Unknown action: {action_type}") from None


def resolve_action(
    hand: HandState,
    player: Player,
    action_type: ActionType,
    amount: Optional[int] = None,
) -> Tuple[int, int, PlayerStatus]:
    """
    Work out the chip effect of an action.

    Args:
        hand: Current hand
        player: Acting player
        action_type: Action to take
        amount: For BET/RAISE, the total the player wants in on this street

    Returns:
        Tuple of (chips moved from stack, new current bet, new player status)

    Raises:
        InvalidAction: If the action is not legal right now
    """
    committed = hand.committed(player.player_id)
    current_bet = hand.current_bet

    if action_type == ActionType.FOLD:
        return 0, current_bet, PlayerStatus.FOLDED

    if action_type == ActionType.CHECK:
        if committed < current_bet:
            raise InvalidAction(f"Cannot check, must call ${current_bet - committed}")
        return 0, current_bet, player.status

    if action_type == ActionType.CALL:
        delta = min(max(current_bet - committed, 0), player.stack)
        status = PlayerStatus.ALL_IN if delta == player.stack else player.status
        return delta, current_bet, status

    if action_type in (ActionType.BET, ActionType.RAISE):
        if not amount:
            raise InvalidAction(f"{action_type.value} requires an amount")
        if amount <= committed or amount <= current_bet:
            raise InvalidAction(f"Must bet more than the current ${current_bet}")
        delta = min(amount - committed, player.stack)
        status = PlayerStatus.ALL_IN if delta == player.stack else player.status
        return delta, max(current_bet, committed + delta), status

    # ALL_IN
    delta = player.stack
    return delta, max(current_bet, committed + delta), PlayerStatus.ALL_IN


def process_action(
    table: TableState,
    action_type: Union[ActionType, str],
    amount: Optional[int] = None,
) -> TableState:
    """
    Process an action by the player whose turn it is.

    Illegal actions (checking while facing a bet, betting without an amount,
    unknown action names) leave the table unchanged; the caller tells the
    operator. The same table object is returned for any no-op.

    Args:
        table: Current table snapshot
        action_type: FOLD, CHECK, CALL, BET, RAISE or ALL_IN (enum or value)
        amount: For BET/RAISE, the total amount for this street

    Returns:
        New table snapshot
    """
    hand = table.current_hand
    if hand is None or hand.phase != HandPhase.AWAITING_ACTION or not hand.active_player_id:
        return table

    player = table.get_player(hand.active_player_id)
    if player is None:
        return table

    try:
        action_type = _parse_action_type(action_type)
        delta, new_bet, status = resolve_action(hand, player, action_type, amount)
    except InvalidAction as e:
        logger.info(f"Rejected {action_type} from {player.name}: {e}")
        return table

    pid = player.player_id
    acted = player.update(stack=player.stack - delta, status=status)
    record = Action(
        player_id=pid,
        street=hand.street,
        category=ActionCategory.BETTING,
        betting_type=action_type,
        amount=delta,
    )

    min_raise = hand.min_raise
    if new_bet > hand.current_bet:
        min_raise = max(min_raise, new_bet - hand.current_bet)

    hand = hand.update(
        current_bet=new_bet,
        per_player_committed={**hand.per_player_committed, pid: hand.committed(pid) + delta},
        total_committed={**hand.total_committed, pid: hand.total_committed.get(pid, 0) + delta},
        actions=hand.actions + (record,),
        min_raise=min_raise,
    )
    table = table.update(
        players=replace_players(table.players, [acted]),
        current_hand=hand,
    )
    logger.debug(f"{player.name} {action_type.value} {delta} (bet {new_bet}, stack {acted.stack})")

    participants = table.participants()
    if sum(1 for p in participants if p.is_in_hand) <= 1:
        return settle_fold_out(table)

    if is_round_complete(hand, participants):
        return close_street(table)

    following = next_to_act(participants, pid)
    if following is None:
        # Everyone else is folded or all-in
        return close_street(table)

    return table.update(current_hand=hand.update(active_player_id=following.player_id))
