"""SQL inventory store (SQLAlchemy)."""
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from boxinventory.database import SessionLocal, session_scope
from boxinventory.exceptions import StoreReadFailure, StoreWriteFailure
from boxinventory.models.record import InventoryRecordRow
from boxinventory.schemas.record import InventoryRecord
from boxinventory.stores.base import InventoryStore

logger = logging.getLogger(__name__)


class SqlStore(InventoryStore):
    """Keeps the records in the ``inventory_records`` table, ordered by position."""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    async def load_all(self) -> List[InventoryRecord]:
        try:
            with session_scope(self.session_factory) as db:
                rows = db.query(InventoryRecordRow).order_by(InventoryRecordRow.position).all()
                return [InventoryRecord.model_validate(row) for row in rows]
        except SQLAlchemyError as e:
            raise StoreReadFailure(f"Database read failed: {e}") from e

    async def save_all(self, records: List[InventoryRecord]) -> None:
        try:
            with session_scope(self.session_factory) as db:
                db.query(InventoryRecordRow).delete()
                db.add_all([
                    InventoryRecordRow(position=position, **record.model_dump())
                    for position, record in enumerate(records)
                ])
        except SQLAlchemyError as e:
            raise StoreWriteFailure(f"Database write failed: {e}") from e
        logger.debug("Wrote %d records to the database", len(records))
