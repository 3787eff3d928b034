"""Card domain entity: one tracked item (name, category, store, restock flag, display rank)."""
from typing import Union
from uuid import uuid4

Order = Union[int, float]

_FIELDS = ("name", "category", "store", "checked", "order")


class Card:
    __slots__ = ("id", "name", "category", "store", "checked", "order")

    def __init__(self, id: str = "", name: str = "", category: str = "", store: str = "",
                 checked: bool = False, order: Order = 0):
        self.id = id or str(uuid4())
        self.name = name
        self.category = category
        self.store = store
        self.checked = bool(checked)
        self.order = order

    def replace(self, **changes) -> "Card":
        '''Returns a copy with the given fields changed. Unknown keys and id are ignored.'''
        values = self.to_dict()
        for key in _FIELDS:
            if key in changes:
                values[key] = changes[key]
        return Card.from_dict(values)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((self.id, self.name, self.category, self.store, self.checked, self.order))

    def __str__(self) -> str:
        mark = "x" if self.checked else " "
        return f"[{mark}] {self.name} ({self.category} @ {self.store}) #{self.order}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a Card from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return Card(
            id=str(d.get("id") or ""),
            name=d.get("name") or "",
            category=d.get("category") or "",
            store=d.get("store") or "",
            checked=bool(d.get("checked", False)),
            order=d.get("order") or 0,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "store": self.store,
            "checked": self.checked,
            "order": self.order,
        }
