from fastapi import APIRouter, Depends, Query
from typing import Literal, Optional

from stockboard.api.dependencies import get_store, require_board
from stockboard.logic.grouping.view import build_grouped_view
from stockboard.logic.store.board_store import BoardStore
from stockboard.utilities.validators import BoardInput, ReorderGroupsInput, ShareInput

router = APIRouter(prefix="/api/boards", tags=["boards"])


@router.get("")
def list_boards(store: BoardStore = Depends(get_store)):
    state = store.state
    return {
        "boards": [{"id": b.id, "name": b.name, "cards": len(b.cards)} for b in state.boards],
        "currentBoardId": state.current_board_id,
    }


@router.post("", status_code=201)
def add_board(body: BoardInput, store: BoardStore = Depends(get_store)):
    before = {b.id for b in store.state.boards}
    state = store.add_board(body.name)
    created = [b for b in state.boards if b.id not in before]
    return created[0].to_dict()


@router.get("/{board_id}")
def get_board(board_id: str, store: BoardStore = Depends(get_store)):
    return require_board(store, board_id).to_dict()


@router.put("/{board_id}")
def edit_board(board_id: str, body: BoardInput, store: BoardStore = Depends(get_store)):
    require_board(store, board_id)
    return store.edit_board(board_id, body.name).find_board(board_id).to_dict()


@router.delete("/{board_id}")
def delete_board(board_id: str, store: BoardStore = Depends(get_store)):
    require_board(store, board_id)
    state = store.delete_board(board_id)
    return {"deleted": board_id, "currentBoardId": state.current_board_id}


@router.post("/{board_id}/select")
def select_board(board_id: str, store: BoardStore = Depends(get_store)):
    require_board(store, board_id)
    return store.set_current_board(board_id).to_dict()


@router.post("/{board_id}/share")
def share_board(board_id: str, body: ShareInput, store: BoardStore = Depends(get_store)):
    require_board(store, board_id)
    return store.share_board(board_id, body.peer_id).find_board(board_id).to_dict()


@router.get("/{board_id}/groups")
def board_groups(board_id: str, store: BoardStore = Depends(get_store),
                 mode: Optional[Literal["category", "store"]] = Query(default=None)):
    """Grouped view of a board. `mode` overrides the store's view mode for this read only."""
    require_board(store, board_id)
    state = store.state
    if mode:
        state = state.replace(view_mode=mode)
    groups = build_grouped_view(state, board_id)
    return {"viewMode": state.view_mode.value, "groups": [g.to_dict() for g in groups]}


@router.post("/{board_id}/reorder/groups")
def reorder_groups(board_id: str, body: ReorderGroupsInput, store: BoardStore = Depends(get_store)):
    require_board(store, board_id)
    return store.reorder_groups(board_id, body.groups).find_board(board_id).to_dict()
