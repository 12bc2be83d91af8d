"""Item routes."""
from fastapi import APIRouter, Depends

from boxinventory.dependencies import get_repository
from boxinventory.schemas.item import ItemNamesResponse
from boxinventory.services.repository import InventoryRepository

router = APIRouter(prefix="/items", tags=["Items"])


@router.get("/names", response_model=ItemNamesResponse)
async def list_item_names(repo: InventoryRepository = Depends(get_repository)):
    """Distinct item names across all boxes, for autocompletion."""
    return ItemNamesResponse(names=repo.item_names())
