"""
Input validation schemas using Pydantic for HTTP bodies and peer messages.
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Literal, Optional, Union


def _strip(v):
    if isinstance(v, str):
        return v.strip()
    return v


class BoardInput(BaseModel):
    """Schema for creating or renaming a board."""
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator('name', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        return _strip(v)


class CardInput(BaseModel):
    """Schema for a new card; all three fields are required."""
    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=50)
    store: str = Field(..., min_length=1, max_length=50)

    @field_validator('name', 'category', 'store', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)


class CardUpdateInput(BaseModel):
    """Schema for a partial card update. Omitted fields stay unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    store: Optional[str] = Field(None, min_length=1, max_length=50)
    checked: Optional[bool] = None
    order: Optional[Union[int, float]] = None

    @field_validator('name', 'category', 'store', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class ReorderCardsInput(BaseModel):
    """Destination group in its new display order (card ids)."""
    source_group: str
    destination_group: str
    card_ids: List[str] = Field(default_factory=list)
    moved_card_ids: Optional[List[str]] = None


class ReorderGroupsInput(BaseModel):
    groups: List[str]


class ViewModeInput(BaseModel):
    mode: Literal['category', 'store']


class ShareInput(BaseModel):
    peer_id: str = Field(..., min_length=1, max_length=200)

    @field_validator('peer_id', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)


class DragStartInput(BaseModel):
    active_id: str


class DragOverInput(BaseModel):
    """`over_kind` tells whether `over_id` is a card id or a group key."""
    active_id: str
    over_id: Optional[str] = None
    over_kind: Literal['card', 'group'] = 'card'


class DragEndInput(BaseModel):
    active_id: str
    over_id: Optional[str] = None
    kind: Literal['card', 'group'] = 'card'
    over_kind: Literal['card', 'group'] = 'card'


# --- Peer channel wire format ---------------------------------------------
class CardPayload(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    category: str = ""
    store: str = ""
    checked: bool = False
    order: Union[int, float] = 0


class BoardPayload(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    cards: List[CardPayload] = Field(default_factory=list)
    sharedWith: List[str] = Field(default_factory=list)
    createdBy: str = "user"

    @field_validator('cards')
    @classmethod
    def unique_card_ids(cls, v):
        """Card ids must be unique within a board."""
        ids = [c.id for c in v]
        if len(ids) != len(set(ids)):
            raise ValueError('Duplicate card id in board payload')
        return v


class PeerMessage(BaseModel):
    type: Literal['REQUEST_BOARD', 'BOARD_UPDATE']
    payload: Optional[BoardPayload] = None

    @model_validator(mode='after')
    def payload_required_for_update(self):
        if self.type == 'BOARD_UPDATE' and self.payload is None:
            raise ValueError('BOARD_UPDATE requires a board payload')
        return self
