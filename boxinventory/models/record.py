"""Inventory record model."""
from sqlalchemy import Column, Integer, String, Text

from boxinventory.database import Base


class InventoryRecordRow(Base):
    """One flattened inventory row - an item in a box, or an empty box placeholder."""
    __tablename__ = "inventory_records"
    
    id = Column(Integer, primary_key=True, index=True)
    position = Column(Integer, nullable=False, index=True)
    box_id = Column(String(200), nullable=False, index=True)
    item_id = Column(String(100), nullable=False, default="")
    item_name = Column(Text, nullable=False, default="")
    item_tags = Column(Text, nullable=False, default="")
