"""Box schemas for request/response validation."""
from typing import List, Optional

from pydantic import BaseModel, field_validator, model_validator

from boxinventory.schemas.item import Item
from boxinventory.services.scan import normalize_box_id


class Box(BaseModel):
    """A group of items identified by a case-normalized id."""
    id: str
    items: List[Item] = []

    @field_validator("id")
    @classmethod
    def normalize_id(cls, value: str) -> str:
        return normalize_box_id(value)

    @model_validator(mode="after")
    def unique_item_ids(self) -> "Box":
        seen = set()
        for item in self.items:
            if item.id in seen:
                raise ValueError(f"Duplicate item id in box {self.id}: {item.id}")
            seen.add(item.id)
        return self


class BoxSave(BaseModel):
    """Schema for saving a box's full item list."""
    items: List[Item] = []


class BoxDetail(BaseModel):
    """A box as shown to the user; new boxes are not yet persisted."""
    box: Box
    is_new: bool


class BoxSaveResponse(BaseModel):
    """Result of saving a box."""
    box: Box
    persisted: bool
    warning: Optional[str] = None


class InventoryResponse(BaseModel):
    """The whole collection, with a notice when the store could not be read."""
    boxes: List[Box]
    warning: Optional[str] = None


class ImportResponse(BaseModel):
    """Result of a CSV import."""
    imported: int
    errors: List[str] = []
    warning: Optional[str] = None
