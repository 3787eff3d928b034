"""Board store: owns the StoreState snapshot and every mutation on it.

Each mutation builds a new snapshot from the current one, swaps it in and
publishes its event while holding the store lock, then returns the new
snapshot. Observers therefore see commits in commit order and should
return quickly; network I/O goes to an executor (see infra.sheets_sync).

Lookup misses (unknown board or card id) are silent: the unchanged snapshot
comes back and nothing is published.

Instances are handed to callers explicitly (see api.dependencies.get_store);
there is no module-level store.
"""
from __future__ import annotations
import logging
from threading import RLock
from typing import Callable, Iterable, List, Optional, Sequence

from stockboard.domain.Board import Board
from stockboard.domain.Card import Card
from stockboard.domain.ViewMode import ViewMode
from stockboard.events.Event_Bus import EventBus, GLOBAL_EVENT_BUS
from stockboard.events.event_helpers import publish_board_changed, publish_store_changed
from stockboard.logic.grouping.view import CardGroup, build_grouped_view
from stockboard.logic.ordering import engine
from stockboard.logic.store.state import StoreState
from stockboard.utilities.constants import DEFAULT_CREATED_BY

logger = logging.getLogger(__name__)

__all__ = ["BoardStore"]

_EDITABLE_CARD_FIELDS = ("name", "category", "store", "checked", "order")


def _clean_name(name) -> str:
    return name.strip() if isinstance(name, str) else ""


class BoardStore:
    def __init__(self, state: Optional[StoreState] = None, bus: Optional[EventBus] = None):
        self._state = state if state is not None else StoreState()
        self._bus = bus if bus is not None else GLOBAL_EVENT_BUS
        self._lock = RLock()

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def current_board(self) -> Optional[Board]:
        return self._state.current_board

    @property
    def view_mode(self) -> ViewMode:
        return self._state.view_mode

    def load(self, state: StoreState) -> StoreState:
        '''Replace the whole snapshot (startup restore). Publishes store.changed.'''
        with self._lock:
            self._state = state
            publish_store_changed(state, bus=self._bus)
        return state

    # --- commit helpers ---------------------------------------------------
    def _update_board(self, board_id: str, change: Callable[[Board], Optional[Board]]) -> StoreState:
        with self._lock:
            before = self._state.find_board(board_id)
            if before is None:
                logger.debug("Board %s not found; ignoring", board_id)
                return self._state
            after = change(before)
            if after is None or after is before:
                return self._state
            self._state = self._state.with_board(after)
            snapshot = self._state
            publish_board_changed(board_id, before, after, snapshot, bus=self._bus)
        return snapshot

    def _update_state(self, change: Callable[[StoreState], StoreState]) -> StoreState:
        with self._lock:
            self._state = change(self._state)
            snapshot = self._state
            publish_store_changed(snapshot, bus=self._bus)
        return snapshot

    # --- boards -------------------------------------------------------------
    def add_board(self, name: str, created_by: str = DEFAULT_CREATED_BY) -> StoreState:
        clean = _clean_name(name)
        if not clean:
            return self._state
        board = Board(name=clean, created_by=created_by)
        with self._lock:
            self._state = self._state.with_board(board)
            snapshot = self._state
            publish_board_changed(board.id, None, board, snapshot, bus=self._bus)
        return snapshot

    def edit_board(self, board_id: str, name: str) -> StoreState:
        clean = _clean_name(name)
        if not clean:
            return self._state
        return self._update_board(board_id, lambda b: b.replace(name=clean))

    def delete_board(self, board_id: str) -> StoreState:
        with self._lock:
            before = self._state.find_board(board_id)
            if before is None:
                return self._state
            self._state = self._state.without_board(board_id)
            snapshot = self._state
            publish_board_changed(board_id, before, None, snapshot, bus=self._bus)
        return snapshot

    def set_current_board(self, board_id: Optional[str]) -> StoreState:
        def change(state: StoreState) -> StoreState:
            board = state.find_board(board_id) if board_id else None
            return state.replace(current_board_id=board.id if board else None)
        return self._update_state(change)

    def replace_board(self, board: Board) -> StoreState:
        '''Whole-board overwrite from a peer; last writer wins, no merging.'''
        with self._lock:
            before = self._state.find_board(board.id)
            self._state = self._state.with_board(board)
            snapshot = self._state
            publish_board_changed(board.id, before, board, snapshot, bus=self._bus)
        return snapshot

    def share_board(self, board_id: str, peer_id: str) -> StoreState:
        peer_id = _clean_name(peer_id)
        if not peer_id:
            return self._state

        def change(board: Board) -> Board:
            if peer_id in board.shared_with:
                return board
            return board.replace(shared_with=board.shared_with + (peer_id,))
        return self._update_board(board_id, change)

    # --- cards --------------------------------------------------------------
    def add_card(self, board_id: str, name: str, category: str, store: str) -> StoreState:
        def change(board: Board) -> Board:
            card = Card(name=name, category=category, store=store, checked=False, order=board.max_order() + 1)
            return board.replace(cards=board.cards + (card,))
        return self._update_board(board_id, change)

    def edit_card(self, board_id: str, card_id: str, **updates) -> StoreState:
        changes = {k: v for k, v in updates.items() if k in _EDITABLE_CARD_FIELDS}

        def change(board: Board) -> Board:
            card = board.find_card(card_id)
            if card is None or not changes:
                return board
            edited = card.replace(**changes)
            if edited == card:
                return board
            return board.replace(cards=tuple(edited if c.id == card_id else c for c in board.cards))
        return self._update_board(board_id, change)

    def toggle_card(self, board_id: str, card_id: str) -> StoreState:
        with self._lock:
            board = self._state.find_board(board_id)
            card = board.find_card(card_id) if board else None
            if card is None:
                return self._state
            return self.edit_card(board_id, card_id, checked=not card.checked)

    def delete_card(self, board_id: str, card_id: str) -> StoreState:
        def change(board: Board) -> Board:
            if board.find_card(card_id) is None:
                return board
            return board.replace(cards=tuple(c for c in board.cards if c.id != card_id))
        return self._update_board(board_id, change)

    # --- view ---------------------------------------------------------------
    def set_view_mode(self, mode) -> StoreState:
        return self._update_state(lambda s: s.replace(view_mode=ViewMode.from_str(mode)))

    def toggle_board_list(self) -> StoreState:
        return self._update_state(lambda s: s.replace(board_list_visible=not s.board_list_visible))

    def toggle_board_list_expanded(self) -> StoreState:
        return self._update_state(lambda s: s.replace(board_list_expanded=not s.board_list_expanded))

    def grouped_cards(self, board_id: Optional[str] = None) -> List[CardGroup]:
        return build_grouped_view(self._state, board_id)

    # --- reordering ---------------------------------------------------------
    def reorder_cards(self, board_id: str, source_group: str, destination_group: str,
                      new_sequence: Sequence, moved_card_ids: Optional[Iterable[str]] = None) -> StoreState:
        """Commit a drag-and-drop move computed with the current view mode."""
        def change(board: Board) -> Board:
            cards = engine.reorder_within_or_across_group(
                board.cards, moved_card_ids, source_group, destination_group,
                new_sequence, self._state.view_mode,
            )
            return board.replace(cards=cards)
        return self._update_board(board_id, change)

    def reorder_groups(self, board_id: str, new_group_order: Sequence[str]) -> StoreState:
        def change(board: Board) -> Board:
            return board.replace(cards=engine.reorder_groups(board.cards, new_group_order, self._state.view_mode))
        return self._update_board(board_id, change)
