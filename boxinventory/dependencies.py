"""FastAPI dependencies."""
import asyncio

from fastapi import Request

from boxinventory.services.repository import InventoryRepository


def get_repository(request: Request) -> InventoryRepository:
    """The session repository created at startup."""
    return request.app.state.repository


def get_write_lock(request: Request) -> asyncio.Lock:
    """Lock that serializes writes to the repository.

    Created at startup on the running loop; made on first use when the app
    was started without its lifespan.
    """
    lock = getattr(request.app.state, "write_lock", None)
    if lock is None:
        lock = request.app.state.write_lock = asyncio.Lock()
    return lock
