"""Inventory routes."""
import asyncio

from fastapi import APIRouter, Depends, Request

from boxinventory.dependencies import get_repository, get_write_lock
from boxinventory.schemas.box import InventoryResponse
from boxinventory.services.repository import InventoryRepository

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get("/", response_model=InventoryResponse)
async def get_inventory(request: Request, repo: InventoryRepository = Depends(get_repository)):
    """The current in-memory collection, with the notice from the last failed load if any."""
    return InventoryResponse(
        boxes=repo.get_all(),
        warning=getattr(request.app.state, "load_warning", None)
    )


@router.post("/reload", response_model=InventoryResponse)
async def reload_inventory(
    request: Request,
    repo: InventoryRepository = Depends(get_repository),
    write_lock: asyncio.Lock = Depends(get_write_lock)
):
    """Reload the collection from the store. A failed read empties it and returns a warning."""
    async with write_lock:
        outcome = await repo.load()
    request.app.state.load_warning = outcome.warning
    return InventoryResponse(boxes=outcome.boxes, warning=outcome.warning)
