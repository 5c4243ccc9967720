"""
HTTP API Routes for HomePoker.

The operator UI drives one table through these routes: seating players,
starting hands, entering cards as the physical dealer deals them, and
recording each player's action.
"""

from typing import Dict, Any, Optional
from fastapi import APIRouter, HTTPException

from homepoker.core.rules import TableConfig
from homepoker.core.table import ActionResult, PokerTable
from homepoker.server.schemas import (
    ActionRequest, CommunityCardsRequest, ConfigRequest, CreateTableRequest,
    NewPlayerRequest, RebuyRequest, RevealRequest, SitOutRequest,
    StartHandRequest, StudCardRequest,
)

router = APIRouter()

# Global table instance for single-room mode
_table: Optional[PokerTable] = None


def get_table() -> PokerTable:
    """Get the current table instance."""
    if _table is None:
        raise HTTPException(status_code=400, detail="Table not created")
    return _table


def _respond(table: PokerTable, result: ActionResult) -> Dict[str, Any]:
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)
    return {
        "success": True,
        "message": result.message,
        "action_type": result.action_type.value if result.action_type else None,
        "amount": result.amount,
        "table": table.get_state(),
    }


@router.get("/table")
async def get_table_state() -> Dict[str, Any]:
    """Get the full table state, including the hand in progress."""
    return get_table().get_state()


@router.post("/table")
async def create_table(req: CreateTableRequest) -> Dict[str, Any]:
    """
    Create the table, replacing any existing one.

    Players listed in the request are seated in order.
    """
    global _table

    try:
        config = TableConfig(
            small_blind=req.small_blind,
            big_blind=req.big_blind,
            ante=req.ante,
        )
        table = PokerTable.create(req.name, req.variant, config)
        for player in req.players:
            result = table.add_player(player.name, player.seat, player.stack)
            if not result.success:
                raise ValueError(result.message)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    table.history.clear()
    _table = table
    return {
        "success": True,
        "message": f"Table {table.state.name} created",
        "table": table.get_state(),
    }


@router.post("/table/config")
async def update_config(req: ConfigRequest) -> Dict[str, Any]:
    """Change forced bets (and optionally the variant) for upcoming hands."""
    table = get_table()
    try:
        config = TableConfig(small_blind=req.small_blind, big_blind=req.big_blind, ante=req.ante)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _respond(table, table.update_config(config, req.variant))


@router.post("/players")
async def add_player(req: NewPlayerRequest) -> Dict[str, Any]:
    table = get_table()
    return _respond(table, table.add_player(req.name, req.seat, req.stack))


@router.delete("/players/{player_id}")
async def remove_player(player_id: str) -> Dict[str, Any]:
    table = get_table()
    return _respond(table, table.remove_player(player_id))


@router.post("/players/{player_id}/rebuy")
async def rebuy(player_id: str, req: RebuyRequest) -> Dict[str, Any]:
    table = get_table()
    return _respond(table, table.rebuy(player_id, req.amount))


@router.post("/players/{player_id}/sit_out")
async def sit_out(player_id: str, req: SitOutRequest) -> Dict[str, Any]:
    table = get_table()
    return _respond(table, table.set_sitting_out(player_id, req.sitting_out))


@router.post("/hands")
async def start_hand(req: Optional[StartHandRequest] = None) -> Dict[str, Any]:
    """
    Start a new hand.

    Posts antes and blinds, then waits for the dealer to confirm the deal.
    """
    table = get_table()
    dealer_seat = req.dealer_seat if req else None

    if not table.start_hand(dealer_seat):
        raise HTTPException(status_code=400, detail="Cannot start hand")

    return {
        "success": True,
        "message": f"Hand #{table.state.current_hand.hand_number} started",
        "table": table.get_state(),
    }


@router.post("/hands/confirm_deal")
async def confirm_deal() -> Dict[str, Any]:
    table = get_table()
    return _respond(table, table.confirm_deal())


@router.post("/hands/community")
async def community_cards(req: Optional[CommunityCardsRequest] = None) -> Dict[str, Any]:
    """Add the flop, turn or river to the board."""
    table = get_table()
    return _respond(table, table.reveal_community_cards(req.cards if req else None))


@router.post("/hands/stud_first")
async def stud_first() -> Dict[str, Any]:
    table = get_table()
    return _respond(table, table.start_stud_dealing())


@router.post("/hands/stud_card")
async def stud_card(req: Optional[StudCardRequest] = None) -> Dict[str, Any]:
    """Deal the next Stud up card."""
    table = get_table()
    return _respond(table, table.deal_stud_card(req.card if req else None))


@router.post("/hands/reveal")
async def reveal(req: RevealRequest) -> Dict[str, Any]:
    """Record a player's face-down cards for showdown."""
    table = get_table()
    return _respond(table, table.reveal_hole_cards(req.player_id, req.cards))


@router.post("/hands/action")
async def take_action(req: ActionRequest) -> Dict[str, Any]:
    """
    Take a betting action for the player whose turn it is.

    If the hand ends, the response table has it in ``hand_history``.
    """
    table = get_table()
    return _respond(table, table.take_action(req.action_type, req.amount))


@router.post("/hands/showdown")
async def showdown() -> Dict[str, Any]:
    table = get_table()
    return _respond(table, table.settle_showdown())


@router.post("/undo")
async def undo() -> Dict[str, Any]:
    table = get_table()
    if not table.undo():
        raise HTTPException(status_code=400, detail="Nothing to undo")
    return {"success": True, "message": "Undone", "table": table.get_state()}


@router.post("/redo")
async def redo() -> Dict[str, Any]:
    table = get_table()
    if not table.redo():
        raise HTTPException(status_code=400, detail="Nothing to redo")
    return {"success": True, "message": "Redone", "table": table.get_state()}
