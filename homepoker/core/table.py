"""
Table management.

This module provides:
- Roster operations between hands (seat, remove, rebuy, sit out)
- Bounded undo/redo history of table snapshots
- PokerTable, the single authoritative table used by the server

Because every snapshot is immutable, undo is simply putting an older
``TableState`` back.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from homepoker.core.dealing import (
    confirm_deal, deal_stud_card, reveal_community_cards, reveal_hole_cards,
    start_hand, start_stud_dealing,
)
from homepoker.core.errors import PokerError
from homepoker.core.game import process_action, resolve_action
from homepoker.core.hand import Evaluator, HandEvaluator
from homepoker.core.player import Player
from homepoker.core.rules import (
    DEFAULT_STACK, HISTORY_LIMIT, ActionType, GameVariant, HandPhase, TableConfig,
)
from homepoker.core.showdown import settle_showdown
from homepoker.core.state import TableState, new_id, replace_players


logger = logging.getLogger(__name__)


# ============= Roster operations =============

def create_table(
    name: str,
    variant: Union[GameVariant, str] = GameVariant.TEXAS_HOLDEM,
    config: Optional[TableConfig] = None,
    players: Sequence[Player] = (),
) -> TableState:
    """
    Create an empty (or pre-seated) table.

    Raises:
        ValueError: On an empty name, unknown variant or duplicate seats
    """
    if not name or not name.strip():
        raise PokerError("Table name is required")

    table = TableState(
        name=name.strip(),
        variant=GameVariant(variant),
        config=config or TableConfig(),
    )
    for player in players:
        table = add_player(table, player.name, player.seat, player.stack, player.player_id)
    return table


def _require_between_hands(table: TableState, player_id: str) -> Player:
    player = table.get_player(player_id)
    if player is None:
        raise PokerError(f"Unknown player: {player_id}")
    if table.current_hand is not None and player_id in table.current_hand.participant_ids:
        raise PokerError(f"{player.name} is playing the current hand")
    return player


def add_player(
    table: TableState,
    name: str,
    seat: Optional[int] = None,
    stack: int = DEFAULT_STACK,
    player_id: Optional[str] = None,
) -> TableState:
    """
    Seat a new player.

    Args:
        table: Current table
        name: Display name
        seat: Seat number; defaults to the seat after the highest taken one
        stack: Starting chips
        player_id: Identifier (generated if omitted)

    Raises:
        PokerError: If the seat is taken or not positive, or the stack is negative
    """
    if not name or not name.strip():
        raise PokerError("Player name is required")
    if stack < 0:
        raise PokerError(f"Stack must be non-negative, got {stack}")

    taken = {p.seat for p in table.players}
    if seat is None:
        seat = max(taken, default=0) + 1
    if seat <= 0:
        raise PokerError(f"Seat must be positive, got {seat}")
    if seat in taken:
        raise PokerError(f"Seat {seat} is taken")

    player_id = player_id or new_id()
    if table.get_player(player_id) is not None:
        raise PokerError(f"Player id {player_id} already exists")

    player = Player(player_id=player_id, name=name.strip(), seat=seat, stack=stack)
    logger.info(f"{player} joins {table.name}")
    return table.update(players=table.players + (player,))


def remove_player(table: TableState, player_id: str) -> TableState:
    player = _require_between_hands(table, player_id)
    logger.info(f"{player} leaves {table.name}")
    return table.update(players=tuple(p for p in table.players if p.player_id != player_id))


def rebuy(table: TableState, player_id: str, amount: int) -> TableState:
    """Add chips to a player's stack."""
    if amount <= 0:
        raise PokerError(f"Rebuy amount must be positive, got {amount}")
    player = _require_between_hands(table, player_id)
    logger.info(f"{player.name} rebuys for {amount}")
    return table.update(players=replace_players(
        table.players, [player.update(stack=player.stack + amount)],
    ))


def set_sitting_out(table: TableState, player_id: str, sitting_out: bool = True) -> TableState:
    player = _require_between_hands(table, player_id)
    if player.is_sitting_out == sitting_out:
        return table
    return table.update(players=replace_players(
        table.players, [player.update(is_sitting_out=sitting_out)],
    ))


def update_config(
    table: TableState,
    config: TableConfig,
    variant: Optional[Union[GameVariant, str]] = None,
) -> TableState:
    """
    Change forced bets (and optionally the variant) for upcoming hands.

    Raises:
        PokerError: If the variant changes while a hand is running
    """
    variant = GameVariant(variant) if variant is not None else table.variant
    if variant != table.variant and table.current_hand is not None:
        raise PokerError("Cannot change the variant during a hand")
    return table.update(config=config, variant=variant)


# ============= Undo / redo =============

class TableHistory:
    """
    Bounded undo/redo stacks of table snapshots.

    Usage:
        history.push(old_state)       # before replacing the state
        state = history.undo(state)   # returns the previous snapshot or None
    """

    def __init__(self, limit: int = HISTORY_LIMIT):
        self.limit = limit
        self._past: List[TableState] = []
        self._future: List[TableState] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    def push(self, state: TableState) -> None:
        """Record a snapshot that is about to be replaced. Clears redo."""
        self._past.append(state)
        if len(self._past) > self.limit:
            del self._past[0]
        self._future.clear()

    def undo(self, current: TableState) -> Optional[TableState]:
        if not self._past:
            return None
        self._future.append(current)
        return self._past.pop()

    def redo(self, current: TableState) -> Optional[TableState]:
        if not self._future:
            return None
        self._past.append(current)
        return self._future.pop()

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()


# ============= PokerTable =============

@dataclass
class ActionResult:
    """Result of a table operation."""
    success: bool
    message: str
    action_type: Optional[ActionType] = None
    amount: int = 0


class PokerTable:
    """
    Home-game table controller.

    Holds the current snapshot, records every change for undo and turns
    engine errors into ``ActionResult`` failures.

    Usage:
        table = PokerTable.create("Friday", GameVariant.TEXAS_HOLDEM,
                                  TableConfig(small_blind=1, big_blind=2))
        table.add_player("Alice")
        table.add_player("Bob")
        table.start_hand()
        table.confirm_deal()
        table.take_action(ActionType.CALL)
    """

    def __init__(
        self,
        state: TableState,
        evaluator: Optional[Evaluator] = None,
        rng: Optional[random.Random] = None,
        history_limit: int = HISTORY_LIMIT,
    ):
        self.state = state
        self.evaluator = evaluator or HandEvaluator()
        self.rng = rng
        self.history = TableHistory(history_limit)

    @classmethod
    def create(
        cls,
        name: str,
        variant: Union[GameVariant, str] = GameVariant.TEXAS_HOLDEM,
        config: Optional[TableConfig] = None,
        **kwargs,
    ) -> PokerTable:
        return cls(create_table(name, variant, config), **kwargs)

    def _commit(self, new_state: TableState) -> bool:
        if new_state is self.state:
            return False
        self.history.push(self.state)
        self.state = new_state
        return True

    def _apply(
        self,
        operation: Callable[..., TableState],
        *args,
        message: str = "OK",
    ) -> ActionResult:
        try:
            new_state = operation(self.state, *args)
        except ValueError as e:
            logger.warning(f"{operation.__name__} failed: {e}")
            return ActionResult(False, str(e))

        if not self._commit(new_state):
            return ActionResult(False, self._idle_message())
        return ActionResult(True, message)

    def _idle_message(self) -> str:
        hand = self.state.current_hand
        if hand is None:
            return "No hand in progress"
        if hand.phase == HandPhase.AWAITING_ACTION:
            return f"Waiting for {hand.active_player_id} to act"
        return f"Not possible while {hand.phase.value}"

    # ----- roster -----

    def add_player(
        self,
        name: str,
        seat: Optional[int] = None,
        stack: int = DEFAULT_STACK,
    ) -> ActionResult:
        return self._apply(add_player, name, seat, stack, message=f"{name} seated")

    def remove_player(self, player_id: str) -> ActionResult:
        return self._apply(remove_player, player_id, message="Player removed")

    def rebuy(self, player_id: str, amount: int) -> ActionResult:
        return self._apply(rebuy, player_id, amount, message=f"Rebuy of {amount}")

    def set_sitting_out(self, player_id: str, sitting_out: bool = True) -> ActionResult:
        return self._apply(
            set_sitting_out, player_id, sitting_out,
            message="Sitting out" if sitting_out else "Back in",
        )

    def update_config(
        self,
        config: TableConfig,
        variant: Optional[Union[GameVariant, str]] = None,
    ) -> ActionResult:
        return self._apply(update_config, config, variant, message="Config updated")

    # ----- hand flow -----

    def is_hand_running(self) -> bool:
        return self.state.current_hand is not None

    def start_hand(self, dealer_seat: Optional[int] = None) -> bool:
        """
        Start a new hand.

        Returns:
            True if hand started successfully, False otherwise
        """
        try:
            new_state = start_hand(self.state, dealer_seat, self.rng)
        except ValueError as e:
            logger.warning(f"Cannot start hand: {e}")
            return False
        return self._commit(new_state)

    def confirm_deal(self) -> ActionResult:
        return self._apply(confirm_deal, message="Cards dealt")

    def reveal_community_cards(self, cards: Optional[Sequence[str]] = None) -> ActionResult:
        return self._apply(reveal_community_cards, cards, message="Board updated")

    def start_stud_dealing(self) -> ActionResult:
        return self._apply(start_stud_dealing, message="Dealing up cards")

    def deal_stud_card(self, card: Optional[str] = None) -> ActionResult:
        return self._apply(deal_stud_card, card, message="Card dealt")

    def reveal_hole_cards(self, player_id: str, cards: Sequence[str]) -> ActionResult:
        return self._apply(reveal_hole_cards, player_id, cards, message="Cards revealed")

    def take_action(
        self,
        action_type: Union[ActionType, str],
        amount: Optional[int] = None,
    ) -> ActionResult:
        """
        Process an action for the player whose turn it is.

        Args:
            action_type: Type of action (FOLD, CHECK, CALL, BET, RAISE, ALL_IN)
            amount: Amount for BET/RAISE actions (total for the street, not increment)

        Returns:
            ActionResult indicating success/failure and details
        """
        hand = self.state.current_hand
        if hand is None or hand.phase != HandPhase.AWAITING_ACTION:
            return ActionResult(False, self._idle_message())

        player = self.state.get_player(hand.active_player_id)
        try:
            action_type = ActionType(action_type)
            delta, _, _ = resolve_action(hand, player, action_type, amount)
        except ValueError as e:
            return ActionResult(False, str(e))

        if not self._commit(process_action(self.state, action_type, amount)):
            return ActionResult(False, "Action not accepted")
        return ActionResult(True, f"{player.name} {action_type.value}", action_type, delta)

    def settle_showdown(self) -> ActionResult:
        hand = self.state.current_hand
        if hand is None or hand.phase != HandPhase.SHOWDOWN:
            return ActionResult(False, self._idle_message())

        if not self._commit(settle_showdown(self.state, self.evaluator)):
            return ActionResult(False, "Showdown could not be evaluated, check the cards")
        return ActionResult(True, f"Hand #{hand.hand_number} settled")

    # ----- history -----

    def undo(self) -> bool:
        previous = self.history.undo(self.state)
        if previous is None:
            return False
        self.state = previous
        return True

    def redo(self) -> bool:
        following = self.history.redo(self.state)
        if following is None:
            return False
        self.state = following
        return True

    def get_state(self) -> Dict[str, Any]:
        state = self.state.to_dict()
        state["can_undo"] = self.history.can_undo
        state["can_redo"] = self.history.can_redo
        return state
