"""
Side pot calculation.

Given how much each player committed to the hand and who folded, split the
chips into a main pot and side pots, each with the players eligible to win
it. Chips nobody can contest (an uncalled bet, or everyone folded) come back
as refunds.

Example: A(50), B(200), C(200), nobody folded
    Main pot: 150, eligible A, B, C
    Side pot: 300, eligible B, C
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from homepoker.core.state import Pot


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerCommitment:
    player_id: str
    amount: int
    is_folded: bool = False


@dataclass(frozen=True)
class PotBand:
    """One chip level of the hand before refunds are separated out."""
    amount: int
    level: int
    contributor_ids: Tuple[str, ...]
    eligible_player_ids: Tuple[str, ...]


@dataclass
class PotResult:
    pots: List[Pot] = field(default_factory=list)
    refunds: Dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(p.amount for p in self.pots) + sum(self.refunds.values())


def pot_bands(commitments: Sequence[PlayerCommitment]) -> List[PotBand]:
    """
    Partition commitments into bands between consecutive commitment levels.

    Folded players' chips count toward every band they reached; folding
    forfeits eligibility, not money. Bands come out lowest level first.
    """
    levels = sorted({c.amount for c in commitments if c.amount > 0})
    bands = []
    previous = 0

    for level in levels:
        amount = sum(max(0, min(c.amount, level) - previous) for c in commitments)
        if amount > 0:
            contributors = sorted(c.player_id for c in commitments if c.amount >= level)
            eligible = sorted(
                c.player_id for c in commitments
                if c.amount >= level and not c.is_folded
            )
            bands.append(PotBand(
                amount=amount,
                level=level,
                contributor_ids=tuple(contributors),
                eligible_player_ids=tuple(eligible),
            ))
        previous = level

    return bands


def _add(refunds: Dict[str, int], player_id: str, amount: int) -> None:
    refunds[player_id] = refunds.get(player_id, 0) + amount


def _split_refund(refunds: Dict[str, int], band: PotBand) -> None:
    """Return a band nobody can win to the players who paid into it."""
    n = len(band.contributor_ids)
    base, remainder = divmod(band.amount, n)
    for i, player_id in enumerate(band.contributor_ids):
        _add(refunds, player_id, base + (1 if i < remainder else 0))


def calculate_pots(commitments: Iterable[PlayerCommitment]) -> PotResult:
    """
    Calculate pots from whole-hand commitments.

    Bands are turned into pots or refunds:
    - no eligible player: refunded to its contributors
    - a single contributor: uncalled bet, refunded to that player
    - otherwise a pot (one eligible player left is an uncontested side pot
      that player still wins)

    The input is not modified, and ``result.total`` always equals the sum of
    the commitments.

    Args:
        commitments: Per-player total commitment and fold flag

    Returns:
        PotResult with pots lowest level first and refunds per player id
    """
    commitments = list(commitments)
    result = PotResult()

    if commitments and all(c.is_folded for c in commitments):
        for c in commitments:
            if c.amount > 0:
                _add(result.refunds, c.player_id, c.amount)
        return result

    for band in pot_bands(commitments):
        if not band.eligible_player_ids:
            _split_refund(result.refunds, band)
        elif len(band.contributor_ids) == 1:
            _add(result.refunds, band.contributor_ids[0], band.amount)
        else:
            result.pots.append(Pot(
                amount=band.amount,
                eligible_player_ids=band.eligible_player_ids,
            ))

    logger.debug(f"Pots: {[p.amount for p in result.pots]} refunds: {result.refunds}")
    return result
