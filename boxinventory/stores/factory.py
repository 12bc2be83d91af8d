"""Store selection from settings."""
from boxinventory.config import Settings
from boxinventory.stores.base import InventoryStore


def build_store(settings: Settings) -> InventoryStore:
    """Create the inventory store named by ``STORE_BACKEND``."""
    backend = settings.STORE_BACKEND.lower()
    if backend == "sql":
        from boxinventory.database import init_db
        from boxinventory.stores.sql import SqlStore

        init_db()
        return SqlStore()
    if backend == "file":
        from boxinventory.stores.file import JsonFileStore

        return JsonFileStore(settings.STORE_PATH)
    if backend == "sheet":
        from boxinventory.stores.sheet import SheetStore

        if not settings.SHEET_READ_URL:
            raise ValueError("SHEET_READ_URL must be set for the sheet store")
        return SheetStore(
            read_url=settings.SHEET_READ_URL,
            write_url=settings.SHEET_WRITE_URL,
            timeout=settings.STORE_TIMEOUT,
        )
    raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")
