"""
Applying pot shares to player stacks.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Mapping, Sequence

from homepoker.core.player import Player


def apply_payouts_to_players(
    players: Sequence[Player],
    final_shares: Mapping[str, int],
    winners: Iterable[str],
) -> List[Player]:
    """
    Credit chip shares to players.

    A player with no positive share is returned as the very same object, so
    callers can detect untouched players by identity. A refund-only recipient
    gets chips but no win.

    Args:
        players: Current players
        final_shares: Chips to credit per player id (pot winnings and refunds)
        winners: Ids of players who won at least one pot

    Returns:
        New list of players with updated stacks and win counts
    """
    winner_set = set(winners)
    result = []
    for player in players:
        share = final_shares.get(player.player_id, 0)
        if share <= 0:
            result.append(player)
            continue
        result.append(player.update(
            stack=player.stack + share,
            wins=player.wins + 1 if player.player_id in winner_set else player.wins,
        ))
    return result


def split_pot(amount: int, winner_ids: Iterable[str], seat_ring: Sequence[str]) -> Dict[str, int]:
    """
    Split a pot evenly among tied winners.

    Odd chips go one at a time to the winners closest to the left of the
    dealer button, following ``seat_ring`` (player ids clockwise from the seat
    after the dealer). Winners missing from the ring sort last.

    Returns:
        Mapping of player id to chips won from this pot
    """
    position = {pid: i for i, pid in enumerate(seat_ring)}
    ordered = sorted(set(winner_ids), key=lambda pid: (position.get(pid, len(position)), pid))
    if not ordered:
        return {}

    base, remainder = divmod(amount, len(ordered))
    return {
        pid: base + (1 if i < remainder else 0)
        for i, pid in enumerate(ordered)
    }
