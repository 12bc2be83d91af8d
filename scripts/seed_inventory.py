"""Script to seed the configured inventory store with sample boxes."""
import asyncio
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from boxinventory.config import settings
from boxinventory.schemas.box import Box
from boxinventory.schemas.item import Item
from boxinventory.services.repository import InventoryRepository
from boxinventory.stores.factory import build_store

SAMPLE_BOXES = [
    Box(id="BOX-001", items=[
        Item(name="Winter Jacket", tags=["clothing", "outdoor", "warm"]),
        Item(name="Wool Scarf", tags=["clothing", "warm"]),
    ]),
    Box(id="BOX-002", items=[
        Item(name="Phillips Screwdriver", tags=["tools", "hardware"]),
        Item(name="Tape Measure", tags=["tools", "measuring"]),
    ]),
    Box(id="BOX-003", items=[
        Item(name="USB-C Cable", tags=["electronics", "cable"]),
    ]),
]


async def seed_inventory():
    """Write the sample boxes unless the store already holds boxes."""
    repository = InventoryRepository(build_store(settings))
    outcome = await repository.load()
    if outcome.warning:
        print(f"Store could not be read, not seeding: {outcome.warning}")
        return
    if outcome.boxes:
        print(f"Store already holds {len(outcome.boxes)} boxes")
        return
    
    result = await repository.upsert_boxes(SAMPLE_BOXES)
    if result.warning:
        print(f"Seeding failed: {result.warning}")
        return
    print(f"Seeded {len(SAMPLE_BOXES)} boxes into the {settings.STORE_BACKEND} store")


if __name__ == "__main__":
    asyncio.run(seed_inventory())
