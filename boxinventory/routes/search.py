"""Search routes."""
from typing import List

from fastapi import APIRouter, Depends, Query

from boxinventory.dependencies import get_repository
from boxinventory.schemas.search import BoxMatch
from boxinventory.services.repository import InventoryRepository
from boxinventory.services.search import search_boxes

router = APIRouter(prefix="/search", tags=["Search"])


@router.get("/", response_model=List[BoxMatch])
async def search(
    q: str = Query("", description="Text to find in item names and tags"),
    repo: InventoryRepository = Depends(get_repository)
):
    """
    Find items by name or tag, case-insensitively.
    
    Returns the boxes holding matching items, each reduced to those items,
    with highlight spans for every occurrence of the query.
    """
    return search_boxes(q, repo.get_all())
