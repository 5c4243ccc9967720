"""
Pydantic schemas for API request validation.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from homepoker.core.rules import DEFAULT_BIG_BLIND, DEFAULT_SMALL_BLIND, DEFAULT_STACK


# ============= Request Schemas =============

class NewPlayerRequest(BaseModel):
    """Request to seat a player."""
    name: str = Field(..., min_length=1)
    seat: Optional[int] = Field(default=None, gt=0)
    stack: int = Field(ge=0, default=DEFAULT_STACK)


class CreateTableRequest(BaseModel):
    """Request to create the table."""
    name: str = Field(default="Home Game", min_length=1)
    variant: str = Field(default="texasHoldem", description="texasHoldem or fiveCardStud")
    small_blind: Optional[int] = Field(default=DEFAULT_SMALL_BLIND, ge=0)
    big_blind: Optional[int] = Field(default=DEFAULT_BIG_BLIND, ge=0)
    ante: Optional[int] = Field(default=None, ge=0)
    players: List[NewPlayerRequest] = Field(default_factory=list)


class ConfigRequest(BaseModel):
    """Request to change forced bets for upcoming hands."""
    small_blind: Optional[int] = Field(default=None, ge=0)
    big_blind: Optional[int] = Field(default=None, ge=0)
    ante: Optional[int] = Field(default=None, ge=0)
    variant: Optional[str] = None


class RebuyRequest(BaseModel):
    amount: int = Field(..., gt=0)


class SitOutRequest(BaseModel):
    sitting_out: bool = True


class StartHandRequest(BaseModel):
    """Request to start a hand. The dealer seat only applies to the first hand."""
    dealer_seat: Optional[int] = Field(default=None, gt=0)


class CommunityCardsRequest(BaseModel):
    """Board cards to add; omit to deal from the engine's deck."""
    cards: Optional[List[str]] = None


class StudCardRequest(BaseModel):
    """Up card for the next player; omit to deal from the engine's deck."""
    card: Optional[str] = None


class RevealRequest(BaseModel):
    """Face-down cards of a player, in order."""
    player_id: str
    cards: List[str] = Field(..., min_length=1)


class ActionRequest(BaseModel):
    """Request to take a betting action."""
    action_type: str = Field(..., description="Action type: fold, check, call, bet, raise, allIn")
    amount: Optional[int] = Field(default=None, ge=0, description="Street total for bet/raise")

