# Models package
from boxinventory.models.record import InventoryRecordRow
