"""Flat inventory record schema, the store's wire format."""
from pydantic import BaseModel


class InventoryRecord(BaseModel):
    """One row per item; an empty box is written as a row with blank item fields."""
    box_id: str = ""
    item_id: str = ""
    item_name: str = ""
    item_tags: str = ""  # comma-joined
    
    class Config:
        from_attributes = True
