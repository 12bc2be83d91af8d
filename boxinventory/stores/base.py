"""Inventory store interface."""
import abc
from typing import List

from boxinventory.schemas.record import InventoryRecord


class InventoryStore(abc.ABC):
    """Durable keeper of the full collection, read and written wholesale.

    Implementations raise ``StoreReadFailure`` / ``StoreWriteFailure``.
    """

    @abc.abstractmethod
    async def load_all(self) -> List[InventoryRecord]:
        """Read every record."""

    @abc.abstractmethod
    async def save_all(self, records: List[InventoryRecord]) -> None:
        """Replace every record with ``records``."""
