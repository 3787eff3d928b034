from fastapi import APIRouter, Depends
import logging

from stockboard.api.dependencies import get_store, require_board
from stockboard.logic.store.board_store import BoardStore
from stockboard.utilities.validators import CardInput, CardUpdateInput, ReorderCardsInput

router = APIRouter(prefix="/api/boards/{board_id}", tags=["cards"])
logger = logging.getLogger(__name__)

# Stale card ids answer 200 with the unchanged board; only a missing board is a 404.


@router.post("/cards", status_code=201)
def add_card(board_id: str, body: CardInput, store: BoardStore = Depends(get_store)):
    require_board(store, board_id)
    before = store.state.find_board(board_id).card_ids()
    board = store.add_card(board_id, body.name, body.category, body.store).find_board(board_id)
    created = [c for c in board.cards if c.id not in before]
    return created[0].to_dict() if created else board.to_dict()


@router.put("/cards/{card_id}")
def edit_card(board_id: str, card_id: str, body: CardUpdateInput, store: BoardStore = Depends(get_store)):
    require_board(store, board_id)
    return store.edit_card(board_id, card_id, **body.changes()).find_board(board_id).to_dict()


@router.post("/cards/{card_id}/toggle")
def toggle_card(board_id: str, card_id: str, store: BoardStore = Depends(get_store)):
    require_board(store, board_id)
    return store.toggle_card(board_id, card_id).find_board(board_id).to_dict()


@router.delete("/cards/{card_id}")
def delete_card(board_id: str, card_id: str, store: BoardStore = Depends(get_store)):
    require_board(store, board_id)
    return store.delete_card(board_id, card_id).find_board(board_id).to_dict()


@router.post("/reorder/cards")
def reorder_cards(board_id: str, body: ReorderCardsInput, store: BoardStore = Depends(get_store)):
    require_board(store, board_id)
    logger.info("Reorder board=%s %s -> %s (%d cards)", board_id, body.source_group,
                body.destination_group, len(body.card_ids))
    state = store.reorder_cards(board_id, body.source_group, body.destination_group,
                                body.card_ids, body.moved_card_ids)
    return state.find_board(board_id).to_dict()
