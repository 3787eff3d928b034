"""Grouping view: the grouped-and-sorted projection the UI renders.

Always derived from the current snapshot on demand; never stored.
"""
from __future__ import annotations
from typing import List, Dict, Any

from stockboard.domain.Card import Card
from stockboard.logic.ordering.engine import compute_grouped_order

__all__ = ["CardGroup", "build_grouped_view"]


class CardGroup:
    def __init__(self, key: str, cards: List[Card]):
        self.key = key
        self.cards = list(cards)

    @property
    def checked_count(self) -> int:
        return sum(1 for c in self.cards if c.checked)

    @property
    def total(self) -> int:
        return len(self.cards)

    def card_ids(self) -> List[str]:
        return [c.id for c in self.cards]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "checked": self.checked_count,
            "total": self.total,
            "cards": [c.to_dict() for c in self.cards],
        }

    def __str__(self) -> str:
        return f"{self.key} ({self.checked_count}/{self.total})"

    __repr__ = __str__


def build_grouped_view(state, board_id: str | None = None) -> List[CardGroup]:
    """Groups of the active board (or of `board_id`) under the state's view mode.

    Returns [] when there is no such board.
    """
    board = state.find_board(board_id) if board_id else state.current_board
    if board is None:
        return []
    grouped = compute_grouped_order(board.cards, state.view_mode)
    return [CardGroup(key, cards) for key, cards in grouped.items()]
