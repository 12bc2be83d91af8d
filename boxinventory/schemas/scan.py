"""Scan and tag suggestion schemas."""
from typing import List

from pydantic import BaseModel


class ScanRequest(BaseModel):
    """A decoded QR payload or a manually typed box id."""
    payload: str


class ScanResponse(BaseModel):
    """The resolved box id and whether the box already exists."""
    box_id: str
    exists: bool


class TagSuggestionResponse(BaseModel):
    """Suggested tags for an item name; empty when the service is unavailable."""
    name: str
    tags: List[str]
