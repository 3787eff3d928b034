"""Board aggregate: a named collection of cards plus sharing metadata."""
from typing import Iterable, Optional, Tuple
from uuid import uuid4

from stockboard.domain.Card import Card, Order


class Board:
    __slots__ = ("id", "name", "cards", "shared_with", "created_by")

    def __init__(self, id: str = "", name: str = "", cards: Optional[Iterable[Card]] = None,
                 shared_with: Optional[Iterable[str]] = None, created_by: str = "user"):
        self.id = id or str(uuid4())
        self.name = name
        self.cards: Tuple[Card, ...] = tuple(cards) if cards else ()
        # keep first occurrence, drop duplicates
        self.shared_with: Tuple[str, ...] = tuple(dict.fromkeys(shared_with or ()))
        self.created_by = created_by

    def replace(self, **changes) -> "Board":
        '''Returns a copy of the board with the given fields changed.'''
        return Board(
            id=self.id,
            name=changes.get("name", self.name),
            cards=changes.get("cards", self.cards),
            shared_with=changes.get("shared_with", self.shared_with),
            created_by=changes.get("created_by", self.created_by),
        )

    def find_card(self, card_id: str) -> Optional[Card]:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def max_order(self) -> Order:
        '''Highest card order on the board, 0 for an empty board.'''
        return max((c.order or 0 for c in self.cards), default=0)

    def card_ids(self):
        return {c.id for c in self.cards}

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        return f"Board {self.name} ({len(self.cards)} cards)"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a Board from its wire dictionary (camelCase keys). Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        cards = [Card.from_dict(c) for c in d.get("cards") or [] if isinstance(c, dict)]
        return Board(
            id=str(d.get("id") or ""),
            name=d.get("name") or "",
            cards=cards,
            shared_with=[str(p) for p in d.get("sharedWith") or []],
            created_by=d.get("createdBy") or "user",
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "cards": [c.to_dict() for c in self.cards],
            "sharedWith": list(self.shared_with),
            "createdBy": self.created_by,
        }
