"""Drag-and-drop adapter.

Translates the drag library's event sequence (start, zero or more over, end)
into BoardStore reorder calls. It keeps only the group the active card was
in when the drag started; detecting the drag itself is the UI's job.

Rules:
  - the caller says whether `over_id` names a card or a group key (over_kind)
  - over on a card of another group moves the active card there at once
  - over on a group key (possibly one with no cards) targets that group
  - a card id that is no longer on the board is a miss: nothing moves
  - end on a group reorders whole groups
  - end on a card splices the destination group and commits the full sequence
  - end without a matching start, or onto nothing, does nothing
"""
from __future__ import annotations
import logging
from typing import List, Optional

from stockboard.domain.Card import Card
from stockboard.logic.ordering.engine import compute_grouped_order
from stockboard.logic.store.board_store import BoardStore

logger = logging.getLogger(__name__)

__all__ = ["DragController", "KIND_CARD", "KIND_GROUP"]

KIND_CARD = "card"
KIND_GROUP = "group"


class DragController:
    def __init__(self, store: BoardStore):
        self.store = store
        self.active_id: Optional[str] = None
        self.active_group: Optional[str] = None

    def _card(self, card_id: Optional[str]) -> Optional[Card]:
        board = self.store.current_board
        if board is None or card_id is None:
            return None
        return board.find_card(card_id)

    def _group_keys(self) -> List[str]:
        board = self.store.current_board
        if board is None:
            return []
        return list(compute_grouped_order(board.cards, self.store.view_mode).keys())

    def _resolve_group(self, over_id: Optional[str], over_kind: str) -> Optional[str]:
        '''Group named by the drop target, None when the target card is gone.'''
        if not over_id:
            return None
        if over_kind == KIND_GROUP:
            return over_id
        over_card = self._card(over_id)
        return self.store.view_mode.key_of(over_card) if over_card is not None else None

    def reset(self):
        self.active_id = None
        self.active_group = None

    def drag_start(self, active_id: str) -> bool:
        card = self._card(active_id)
        if card is None:
            self.reset()
            return False
        self.active_id = card.id
        self.active_group = self.store.view_mode.key_of(card)
        return True

    def drag_over(self, active_id: str, over_id: Optional[str], over_kind: str = KIND_CARD) -> bool:
        """Move the active card into the hovered group when it changes group."""
        if self.active_group is None or active_id != self.active_id or not over_id:
            return False
        board = self.store.current_board
        card = self._card(active_id)
        if board is None or card is None:
            return False
        over_group = self._resolve_group(over_id, over_kind)
        if over_group is None or over_group == self.active_group:
            return False
        self.store.reorder_cards(board.id, self.active_group, over_group, [card])
        logger.debug("Card %s dragged from %s into %s", card.id, self.active_group, over_group)
        self.active_group = over_group
        return True

    def drag_end(self, active_id: str, over_id: Optional[str], kind: str = KIND_CARD,
                 over_kind: str = KIND_CARD) -> bool:
        """Commit the drop. Returns True when the store was asked to reorder.

        `kind` is what is being dragged, `over_kind` what it was dropped on.
        """
        try:
            if kind == KIND_GROUP:
                return self._drop_group(active_id, over_id)
            if self.active_id is None or active_id != self.active_id:
                return False
            return self._drop_card(active_id, over_id, over_kind)
        finally:
            self.reset()

    def _drop_group(self, active_key: str, over_key: Optional[str]) -> bool:
        board = self.store.current_board
        keys = self._group_keys()
        if board is None or over_key is None or active_key not in keys or over_key not in keys:
            return False
        old_index, new_index = keys.index(active_key), keys.index(over_key)
        if old_index == new_index:
            return False
        keys.insert(new_index, keys.pop(old_index))
        self.store.reorder_groups(board.id, keys)
        return True

    def _drop_card(self, active_id: str, over_id: Optional[str], over_kind: str) -> bool:
        board = self.store.current_board
        active = self._card(active_id)
        if board is None or active is None:
            return False
        destination_group = self._resolve_group(over_id, over_kind)
        if destination_group is None:
            logger.debug("Drop target %s for card %s not found; ignoring", over_id, active_id)
            return False
        mode = self.store.view_mode
        source_group = self.active_group or mode.key_of(active)
        over_card = self._card(over_id) if over_kind == KIND_CARD else None

        sequence = list(compute_grouped_order(board.cards, mode).get(destination_group, []))
        ids = [c.id for c in sequence]
        old_index = ids.index(active.id) if active.id in ids else None
        if old_index is not None:
            sequence.pop(old_index)

        # array-move: the dropped card takes the slot of the card it was dropped on
        if over_card is None:
            new_index = len(sequence)
        elif over_card.id == active.id:
            new_index = old_index if old_index is not None else len(sequence)
        else:
            new_index = ids.index(over_card.id)
        sequence.insert(new_index, active)

        self.store.reorder_cards(board.id, source_group, destination_group, sequence)
        return True
