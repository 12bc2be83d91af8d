"""JSON file inventory store."""
import json
import os
from pathlib import Path
from typing import List

from pydantic import TypeAdapter, ValidationError

from boxinventory.exceptions import StoreReadFailure, StoreWriteFailure
from boxinventory.schemas.record import InventoryRecord
from boxinventory.stores.base import InventoryStore

_records = TypeAdapter(List[InventoryRecord])


class JsonFileStore(InventoryStore):
    """Keeps the records as a JSON array in a single file. A missing file reads as empty."""

    def __init__(self, path):
        self.path = Path(path)

    async def load_all(self) -> List[InventoryRecord]:
        if not self.path.exists():
            return []
        try:
            return _records.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            raise StoreReadFailure(f"Could not read {self.path}: {e}") from e

    async def save_all(self, records: List[InventoryRecord]) -> None:
        payload = json.dumps([record.model_dump() for record in records], indent=2)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StoreWriteFailure(f"Could not write {self.path}: {e}") from e
