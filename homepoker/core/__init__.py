"""
HomePoker Core - Pure Python Table Engine

This module contains all game logic without any network dependencies.
"""

from homepoker.core.card import Card, create_deck, deal_cards, shuffle_deck
from homepoker.core.dealing import (
    confirm_deal, deal_stud_card, initialize_hand, reveal_community_cards,
    reveal_hole_cards, start_hand, start_stud_dealing,
)
from homepoker.core.errors import (
    InsufficientCards, InsufficientPlayers, InvalidAction, InvalidCards, PokerError,
)
from homepoker.core.game import is_round_complete, next_to_act, process_action
from homepoker.core.hand import EvaluationResult, HandEvaluator, HandRank, evaluate_hand
from homepoker.core.payouts import apply_payouts_to_players, split_pot
from homepoker.core.player import Player
from homepoker.core.pots import PlayerCommitment, PotResult, calculate_pots
from homepoker.core.rules import (
    ActionType, GameVariant, HandPhase, PlayerStatus, Street, TableConfig,
)
from homepoker.core.showdown import compute_showdown_shares, settle_showdown
from homepoker.core.state import HandState, HandSummary, Pot, TableState
from homepoker.core.table import ActionResult, PokerTable, TableHistory, create_table

__all__ = [
    "Card",
    "create_deck",
    "deal_cards",
    "shuffle_deck",
    "confirm_deal",
    "deal_stud_card",
    "initialize_hand",
    "reveal_community_cards",
    "reveal_hole_cards",
    "start_hand",
    "start_stud_dealing",
    "InsufficientCards",
    "InsufficientPlayers",
    "InvalidAction",
    "InvalidCards",
    "PokerError",
    "is_round_complete",
    "next_to_act",
    "process_action",
    "EvaluationResult",
    "HandEvaluator",
    "HandRank",
    "evaluate_hand",
    "apply_payouts_to_players",
    "split_pot",
    "Player",
    "PlayerCommitment",
    "PotResult",
    "calculate_pots",
    "ActionType",
    "GameVariant",
    "HandPhase",
    "PlayerStatus",
    "Street",
    "TableConfig",
    "compute_showdown_shares",
    "settle_showdown",
    "HandState",
    "HandSummary",
    "Pot",
    "TableState",
    "ActionResult",
    "PokerTable",
    "TableHistory",
    "create_table",
]
