"""Search result schemas."""
from typing import List

from pydantic import BaseModel

from boxinventory.schemas.item import Item


class Span(BaseModel):
    """Half-open character range ``[start, end)`` of a query occurrence."""
    start: int
    end: int


class ItemMatch(BaseModel):
    """An item that matched, with highlight spans for its name and each tag."""
    item: Item
    name_highlights: List[Span] = []
    tag_highlights: List[List[Span]] = []


class BoxMatch(BaseModel):
    """A box reduced to its matching items."""
    box_id: str
    items: List[ItemMatch]
