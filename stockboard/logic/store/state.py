"""StoreState: immutable snapshot of everything the board store owns.

The boards tuple is the single source of truth. The active board is kept as
an id and resolved by lookup on every read, so there is no second copy of it
that could go stale.
"""
from __future__ import annotations
from typing import Iterable, Optional, Tuple, Dict, Any

from stockboard.domain.Board import Board
from stockboard.domain.ViewMode import ViewMode

__all__ = ["StoreState"]

_UNSET = object()


class StoreState:
    __slots__ = ("boards", "current_board_id", "view_mode", "board_list_visible", "board_list_expanded")

    def __init__(self, boards: Optional[Iterable[Board]] = None, current_board_id: Optional[str] = None,
                 view_mode: ViewMode = ViewMode.CATEGORY, board_list_visible: bool = False,
                 board_list_expanded: bool = True):
        self.boards: Tuple[Board, ...] = tuple(boards) if boards else ()
        self.current_board_id = current_board_id
        self.view_mode = ViewMode.from_str(view_mode)
        self.board_list_visible = board_list_visible
        self.board_list_expanded = board_list_expanded

    @property
    def current_board(self) -> Optional[Board]:
        if self.current_board_id is None:
            return None
        return self.find_board(self.current_board_id)

    def find_board(self, board_id: str) -> Optional[Board]:
        for board in self.boards:
            if board.id == board_id:
                return board
        return None

    def replace(self, boards=_UNSET, current_board_id=_UNSET, view_mode=_UNSET,
                board_list_visible=_UNSET, board_list_expanded=_UNSET) -> "StoreState":
        return StoreState(
            boards=self.boards if boards is _UNSET else boards,
            current_board_id=self.current_board_id if current_board_id is _UNSET else current_board_id,
            view_mode=self.view_mode if view_mode is _UNSET else view_mode,
            board_list_visible=self.board_list_visible if board_list_visible is _UNSET else board_list_visible,
            board_list_expanded=self.board_list_expanded if board_list_expanded is _UNSET else board_list_expanded,
        )

    def with_board(self, board: Board) -> "StoreState":
        '''Replace the board with the same id, or append it when unknown.'''
        if self.find_board(board.id) is None:
            return self.replace(boards=self.boards + (board,))
        return self.replace(boards=tuple(board if b.id == board.id else b for b in self.boards))

    def without_board(self, board_id: str) -> "StoreState":
        current = None if self.current_board_id == board_id else self.current_board_id
        return self.replace(boards=tuple(b for b in self.boards if b.id != board_id), current_board_id=current)

    def __eq__(self, other) -> bool:
        if not isinstance(other, StoreState):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        return f"StoreState({len(self.boards)} boards, current={self.current_board_id}, mode={self.view_mode.value})"

    __repr__ = __str__

    def to_dict(self) -> Dict[str, Any]:
        return {
            "boards": [b.to_dict() for b in self.boards],
            "currentBoardId": self.current_board_id,
            "viewMode": self.view_mode.value,
            "isBoardListVisible": self.board_list_visible,
            "isBoardListExpanded": self.board_list_expanded,
        }

    @staticmethod
    def from_dict(data) -> "StoreState":
        d = dict(data) if isinstance(data, dict) else {}
        boards = [Board.from_dict(b) for b in d.get("boards") or [] if isinstance(b, dict)]
        state = StoreState(
            boards=boards,
            current_board_id=d.get("currentBoardId"),
            view_mode=ViewMode.from_str(d.get("viewMode", ViewMode.CATEGORY.value)),
            board_list_visible=bool(d.get("isBoardListVisible", False)),
            board_list_expanded=bool(d.get("isBoardListExpanded", True)),
        )
        if state.current_board_id is not None and state.current_board is None:
            state = state.replace(current_board_id=None)
        return state
