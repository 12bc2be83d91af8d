"""Item schemas for request/response validation."""
import secrets
import time
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator


def new_item_id() -> str:
    """Generate a fresh item id, e.g. ``ITEM-1718000000000-3fa2c1d9``."""
    return f"ITEM-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def normalize_tags(tags: Iterable[str]) -> List[str]:
    """Trim and lowercase tags, dropping empty ones. Order and duplicates are kept."""
    cleaned = (tag.strip().lower() for tag in tags)
    return [tag for tag in cleaned if tag]


def parse_tags(text: Optional[str]) -> List[str]:
    """Split a comma-joined tag string as stored in the inventory records."""
    if not text:
        return []
    return normalize_tags(text.split(","))


class Item(BaseModel):
    """A single inventory entry inside a box."""
    id: str = Field(default_factory=new_item_id)
    name: str
    tags: List[str] = []

    @field_validator("id", "name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value: List[str]) -> List[str]:
        return normalize_tags(value)


class ItemCreate(BaseModel):
    """Schema for adding an item to a box."""
    name: str
    tags: Optional[List[str]] = None
    auto_tag: bool = False  # Ask the suggestion service when no tags are given


class ItemUpdate(BaseModel):
    """Schema for updating an item in place."""
    name: Optional[str] = None
    tags: Optional[List[str]] = None


class ItemNamesResponse(BaseModel):
    """Distinct item names, for autocompletion."""
    names: List[str]
