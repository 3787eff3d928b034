"""ViewMode: which card field partitions the board into groups."""
from enum import Enum

from stockboard.domain.Card import Card


class ViewMode(Enum):
    CATEGORY = "category"
    STORE = "store"

    @classmethod
    def from_str(cls, value) -> "ViewMode":
        if isinstance(value, ViewMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.CATEGORY

    def key_of(self, card: Card) -> str:
        '''Grouping key of a card under this mode.'''
        if self is ViewMode.CATEGORY:
            return card.category
        if self is ViewMode.STORE:
            return card.store
        raise ValueError(f"Unhandled view mode: {self!r}")

    def assign(self, card: Card, key: str) -> Card:
        '''Copy of the card moved into group `key` under this mode.'''
        if self is ViewMode.CATEGORY:
            return card.replace(category=key)
        if self is ViewMode.STORE:
            return card.replace(store=key)
        raise ValueError(f"Unhandled view mode: {self!r}")
