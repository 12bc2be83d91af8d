from typing import List

import pytest
from fastapi.testclient import TestClient

from boxinventory.exceptions import StoreReadFailure, StoreWriteFailure
from boxinventory.schemas.box import Box
from boxinventory.schemas.item import Item
from boxinventory.schemas.record import InventoryRecord
from boxinventory.services.records import flatten_boxes
from boxinventory.services.repository import InventoryRepository
from boxinventory.stores.base import InventoryStore


class FakeStore(InventoryStore):
    """In-memory store that can be told to fail."""

    def __init__(self, records: List[InventoryRecord] = None):
        self.records = list(records or [])
        self.saves = 0
        self.fail_read = False
        self.fail_write = False

    async def load_all(self):
        if self.fail_read:
            raise StoreReadFailure("network down")
        return list(self.records)

    async def save_all(self, records):
        if self.fail_write:
            raise StoreWriteFailure("server rejected")
        self.saves += 1
        self.records = list(records)


@pytest.fixture
def sample_boxes():
    return [
        Box(id="BOX-001", items=[
            Item(id="I1", name="Winter Jacket", tags=["clothing", "outdoor"]),
            Item(id="I2", name="Wool Scarf", tags=["clothing", "warm"]),
        ]),
        Box(id="BOX-002", items=[
            Item(id="I3", name="Phillips Screwdriver", tags=["tools"]),
        ]),
        Box(id="SHELF-A", items=[]),
    ]


@pytest.fixture
def store(sample_boxes):
    return FakeStore(flatten_boxes(sample_boxes))


@pytest.fixture
def repository(store):
    return InventoryRepository(store)


@pytest.fixture
def api_client(store):
    import asyncio

    from boxinventory.main import app

    repo = InventoryRepository(store)
    asyncio.run(repo.load())
    app.state.repository = repo
    app.state.load_warning = None
    app.state.write_lock = None
    # Lifespan is not entered without the context manager, so the real store is never built
    client = TestClient(app)
    yield client, store, repo
