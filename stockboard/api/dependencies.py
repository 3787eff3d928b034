"""FastAPI dependencies: hand the app's BoardStore and DragController to handlers."""
from fastapi import HTTPException, Request

from stockboard.domain.Board import Board
from stockboard.logic.ordering.drag import DragController
from stockboard.logic.store.board_store import BoardStore


def get_store(request: Request) -> BoardStore:
    return request.app.state.store


def get_drag(request: Request) -> DragController:
    return request.app.state.drag


def require_board(store: BoardStore, board_id: str) -> Board:
    board = store.state.find_board(board_id)
    if board is None:
        raise HTTPException(status_code=404, detail="Board not found")
    return board
