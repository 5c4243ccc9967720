"""
Starting hands and dealing cards.

The engine follows a physical dealer. After a hand is set up (forced bets
posted, cards dealt or placeholders laid out) it waits for the dealer at
each checkpoint:

    Hold'em: deal confirm -> preflop -> flop cards -> flop -> turn card -> ...
    Stud:    deal confirm -> street1 -> one up card per player -> street2 -> ...

Cards can be drawn from the engine's shuffled deck or entered by the
operator. Entered cards are validated and removed from the deck.
"""

from __future__ import annotations
import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple

from homepoker.core.card import create_deck, deal_cards, normalize_codes, shuffle_deck
from homepoker.core.errors import InsufficientPlayers, InvalidCards, PokerError
from homepoker.core.game import open_betting
from homepoker.core.player import Player
from homepoker.core.rules import (
    COMMUNITY_CARDS_BY_STREET, HOLE_CARDS, MIN_PLAYERS,
    ActionCategory, GameVariant, HandPhase, PlayerStatus,
    best_showing_player, build_seat_ring, first_street, get_blind_positions,
    get_first_to_act_position, sort_by_seat, street_number,
)
from homepoker.core.state import (
    Action, HandState, PlayerCard, PlayerHand, Pot, TableState,
)


logger = logging.getLogger(__name__)


def choose_dealer_seat(
    table: TableState,
    eligible: Sequence[Player],
    dealer_seat: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """
    Pick the dealer seat for the next hand.

    First hand: the requested seat, or a random eligible seat. Later hands:
    the next eligible seat after the previous dealer, wrapping around. If the
    previous dealer can't play this hand, the lowest eligible seat deals.

    Raises:
        ValueError: If the requested first-hand seat has no eligible player
    """
    seats = [p.seat for p in sort_by_seat(eligible)]

    if not table.hand_history:
        if dealer_seat is None:
            return (rng or random).choice(seats)
        if dealer_seat not in seats:
            raise ValueError(f"Seat {dealer_seat} has no player who can deal")
        return dealer_seat

    last_dealer = table.hand_history[-1].dealer_seat
    if last_dealer not in seats:
        return seats[0]
    return next((s for s in seats if s > last_dealer), seats[0])


def initialize_hand(
    table: TableState,
    dealer_seat: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[HandState, List[Player]]:
    """
    Set up a new hand.

    Players with chips who are not sitting out are dealt in. Antes (any
    variant) and blinds (Hold'em) are posted, capped at the player's stack;
    a player who posts their last chip is all-in.

    Args:
        table: Table between hands
        dealer_seat: Dealer for the first hand (random if omitted)
        rng: Random source for shuffling and the first dealer

    Returns:
        Tuple of (new hand, all table players with updated stacks and statuses)

    Raises:
        InsufficientPlayers: If fewer than two players can be dealt in
    """
    eligible = sort_by_seat([p for p in table.players if p.can_be_dealt_in])
    if len(eligible) < MIN_PLAYERS:
        raise InsufficientPlayers(
            f"Need at least {MIN_PLAYERS} players with chips, have {len(eligible)}"
        )

    variant = table.variant
    config = table.config
    dealer = choose_dealer_seat(table, eligible, dealer_seat, rng)
    dealer_pos = next(i for i, p in enumerate(eligible) if p.seat == dealer)

    players: Dict[str, Player] = {
        p.player_id: p.update(
            status=PlayerStatus.ACTIVE if p.can_be_dealt_in else PlayerStatus.SITTING_OUT
        )
        for p in table.players
    }
    street_bets: Dict[str, int] = {}
    totals: Dict[str, int] = {}

    def post(player_id: str, amount: int, street_bet: bool) -> int:
        player = players[player_id]
        paid = min(player.stack, amount)
        players[player_id] = player.update(
            stack=player.stack - paid,
            status=PlayerStatus.ALL_IN if paid == player.stack else player.status,
        )
        totals[player_id] = totals.get(player_id, 0) + paid
        if street_bet:
            street_bets[player_id] = street_bets.get(player_id, 0) + paid
        return paid

    pots = ()
    if config.ante:
        antes = sum(post(p.player_id, config.ante, street_bet=False) for p in eligible)
        if antes > 0:
            pots = (Pot(amount=antes, eligible_player_ids=tuple(p.player_id for p in eligible)),)

    current_bet = 0
    if variant == GameVariant.TEXAS_HOLDEM and config.has_blinds:
        sb_pos, bb_pos = get_blind_positions(len(eligible), dealer_pos)
        post(eligible[sb_pos].player_id, config.small_blind, street_bet=True)
        post(eligible[bb_pos].player_id, config.big_blind, street_bet=True)
        current_bet = config.big_blind

    deck = shuffle_deck(create_deck(), rng)
    player_hands = []
    for p in eligible:
        if variant == GameVariant.TEXAS_HOLDEM:
            dealt, deck = deal_cards(deck, HOLE_CARDS)
            cards = tuple(PlayerCard(code) for code in dealt)
        else:
            # The Stud hole card stays unknown until it is revealed
            cards = (PlayerCard(""),)
        player_hands.append(PlayerHand(player_id=p.player_id, cards=cards))

    hand = HandState(
        hand_number=len(table.hand_history) + 1,
        variant=variant,
        dealer_seat=dealer,
        street=first_street(variant),
        phase=HandPhase.AWAITING_DEAL_CONFIRM,
        player_hands=tuple(player_hands),
        pots=pots,
        current_bet=current_bet,
        per_player_committed=street_bets,
        total_committed=totals,
        deck=tuple(deck),
        min_raise=config.big_blind or 1,
    )

    logger.info(
        f"Hand #{hand.hand_number} ({variant.value}): dealer seat {dealer}, "
        f"{len(eligible)} players, {sum(totals.values())} in forced bets"
    )
    return hand, [players[p.player_id] for p in table.players]


def start_hand(
    table: TableState,
    dealer_seat: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> TableState:
    """
    Begin a new hand on the table.

    Raises:
        PokerError: If a hand is already in progress
        InsufficientPlayers: If fewer than two players can be dealt in
    """
    if table.current_hand is not None:
        raise PokerError("A hand is already in progress")

    hand, players = initialize_hand(table, dealer_seat, rng)
    return table.update(players=tuple(players), current_hand=hand)


def confirm_deal(table: TableState) -> TableState:
    """
    The dealer has dealt the starting cards: open the first betting round.

    Hold'em heads-up the dealer acts first, otherwise the seat left of the
    big blind. In Stud the seat left of the dealer starts.
    """
    hand = table.current_hand
    if hand is None or hand.phase != HandPhase.AWAITING_DEAL_CONFIRM:
        return table

    participants = table.participants()
    dealer_pos = next(
        (i for i, p in enumerate(participants) if p.seat == hand.dealer_seat), 0
    )
    start = get_first_to_act_position(hand.variant, len(participants), dealer_pos)
    return open_betting(table, participants[start:] + participants[:start])


def _validate_entered(hand: HandState, cards: Sequence[str], expected: int) -> List[str]:
    """
    Validate operator-entered cards.

    Entered cards must be real card codes and must not already be showing
    (on the board or face up in front of a player).

    Raises:
        InvalidCards: If a code is malformed, the count is wrong, or a card
            is already showing
    """
    try:
        codes = normalize_codes(cards)
    except ValueError as e:
        raise InvalidCards(str(e)) from e

    if len(codes) != expected:
        raise InvalidCards(f"Expected {expected} cards, got {len(codes)}")
    if len(set(codes)) != len(codes):
        raise InvalidCards(f"Duplicate cards entered: {codes}")

    showing = set(hand.board)
    for player_hand in hand.player_hands:
        showing.update(player_hand.up_codes)
    repeated = showing.intersection(codes)
    if repeated:
        raise InvalidCards(f"Cards already showing: {sorted(repeated)}")
    return codes


def reveal_community_cards(table: TableState, cards: Optional[Sequence[str]] = None) -> TableState:
    """
    Put the flop, turn or river on the board.

    Without ``cards`` the engine burns one card and deals from its deck.
    Betting then starts left of the dealer; if fewer than two players can
    still bet the street is skipped.

    Raises:
        InvalidCards: If entered cards are invalid
    """
    hand = table.current_hand
    if hand is None or hand.phase != HandPhase.AWAITING_COMMUNITY_CARDS:
        return table

    needed = COMMUNITY_CARDS_BY_STREET[hand.street]
    deck = list(hand.deck)
    if cards is None:
        _, deck = deal_cards(deck, 1)
        dealt, deck = deal_cards(deck, needed)
    else:
        dealt = _validate_entered(hand, cards, needed)
        deck = [c for c in deck if c not in dealt]

    hand = hand.update(board=hand.board + tuple(dealt), deck=tuple(deck))
    table = table.update(current_hand=hand)
    logger.info(f"Hand #{hand.hand_number} {hand.street.value}: {' '.join(dealt)}")

    return open_betting(table, build_seat_ring(table.participants(), hand.dealer_seat))


def start_stud_dealing(table: TableState) -> TableState:
    """Acknowledge the dealer is about to deal the first round of up cards."""
    hand = table.current_hand
    if hand is None or hand.phase != HandPhase.AWAITING_STUD_FIRST:
        return table
    return table.update(current_hand=hand.update(phase=HandPhase.AWAITING_STUD_CARD))


def _open_stud_betting(table: TableState) -> TableState:
    hand = table.current_hand
    ring = build_seat_ring(table.participants(), hand.dealer_seat)
    up_cards = {ph.player_id: ph.up_codes for ph in hand.player_hands}

    first = best_showing_player([p.player_id for p in ring if p.is_active], up_cards)
    if first is not None:
        start = next(i for i, p in enumerate(ring) if p.player_id == first)
        ring = ring[start:] + ring[:start]
    return open_betting(table, ring)


def deal_stud_card(table: TableState, card: Optional[str] = None) -> TableState:
    """
    Deal the next face-up Stud card.

    Cards go one at a time, clockwise from the dealer's left, to every player
    still in the hand. Once everyone has their card for this street, betting
    opens with the best showing hand.

    Raises:
        InvalidCards: If an entered card is invalid
    """
    hand = table.current_hand
    if hand is None or hand.phase != HandPhase.AWAITING_STUD_CARD:
        return table

    ring = [
        p for p in build_seat_ring(table.participants(), hand.dealer_seat)
        if p.is_in_hand
    ]
    needed = street_number(hand.street) - 1
    pending = [p for p in ring if len(hand.hand_of(p.player_id).up_codes) < needed]
    if not pending:
        return _open_stud_betting(table)

    recipient = pending[0]
    if card is None:
        dealt, deck = deal_cards(list(hand.deck), 1)
        code = dealt[0]
    else:
        code = _validate_entered(hand, [card], 1)[0]
        deck = [c for c in hand.deck if c != code]

    player_hands = tuple(
        PlayerHand(ph.player_id, ph.cards + (PlayerCard(code, face_up=True),))
        if ph.player_id == recipient.player_id else ph
        for ph in hand.player_hands
    )
    record = Action(
        player_id=recipient.player_id,
        street=hand.street,
        category=ActionCategory.ADMIN,
        metadata={"card_dealt_to": recipient.player_id, "card_code": code, "is_face_up": True},
    )
    table = table.update(current_hand=hand.update(
        player_hands=player_hands,
        deck=tuple(deck),
        actions=hand.actions + (record,),
    ))
    logger.info(f"Hand #{hand.hand_number} {hand.street.value}: {code} to {recipient.name}")

    if len(pending) > 1:
        return table
    return _open_stud_betting(table)


def reveal_hole_cards(table: TableState, player_id: str, cards: Sequence[str]) -> TableState:
    """
    Record a player's face-down cards, turning them face up.

    Used at showdown: the Stud hole card, or Hold'em hole cards as actually
    dealt at the table. Cards replace the face-down cards in order.

    Raises:
        InvalidCards: If the player has no face-down cards, the count does not
            match, or a card is invalid or already showing
    """
    hand = table.current_hand
    if hand is None:
        raise InvalidCards("No hand in progress")

    player_hand = hand.hand_of(player_id)
    if player_hand is None:
        raise InvalidCards(f"Player {player_id} is not in this hand")

    hidden = [i for i, c in enumerate(player_hand.cards) if not c.face_up]
    if not hidden:
        raise InvalidCards(f"Player {player_id} has no face-down cards")

    codes = _validate_entered(hand, cards, len(hidden))
    new_cards = list(player_hand.cards)
    for index, code in zip(hidden, codes):
        new_cards[index] = PlayerCard(code, face_up=True)

    player_hands = tuple(
        PlayerHand(player_id, tuple(new_cards)) if ph.player_id == player_id else ph
        for ph in hand.player_hands
    )
    deck = tuple(c for c in hand.deck if c not in codes)
    return table.update(current_hand=hand.update(player_hands=player_hands, deck=deck))
