"""Conversion between the box collection and flat inventory records."""
import logging
from typing import Dict, Iterable, List

from boxinventory.schemas.box import Box
from boxinventory.schemas.item import Item, new_item_id, parse_tags
from boxinventory.schemas.record import InventoryRecord
from boxinventory.services.scan import normalize_box_id

logger = logging.getLogger(__name__)

RECORD_FIELDS = ["box_id", "item_id", "item_name", "item_tags"]


def is_placeholder(record: InventoryRecord) -> bool:
    """True for the row written for a box without items."""
    return not (record.item_id or record.item_name or record.item_tags)


def flatten_boxes(boxes: Iterable[Box]) -> List[InventoryRecord]:
    """One record per item. Empty boxes get a placeholder row so they survive a reload."""
    records = []
    for box in boxes:
        if not box.items:
            records.append(InventoryRecord(box_id=box.id))
            continue
        for item in box.items:
            records.append(InventoryRecord(
                box_id=box.id,
                item_id=item.id,
                item_name=item.name,
                item_tags=",".join(item.tags),
            ))
    return records


def group_records(records: Iterable[InventoryRecord]) -> List[Box]:
    """
    Rebuild boxes from records, in order of first appearance.
    
    Rows without a box id are skipped. A placeholder row restores an empty
    box; any other row without an item name is malformed and skipped. Rows
    without an item id get a generated one, and a row repeating an item id
    already seen in the same box is dropped.
    """
    grouped: Dict[str, List[Item]] = {}
    for record in records:
        box_id = (record.box_id or "").strip()
        if not box_id:
            continue
        box_id = normalize_box_id(box_id)
        if is_placeholder(record):
            grouped.setdefault(box_id, [])
            continue
        
        name = (record.item_name or "").strip()
        if not name:
            logger.debug("Skipping record without item name in box %s", box_id)
            continue
        items = grouped.setdefault(box_id, [])
        item_id = (record.item_id or "").strip() or new_item_id()
        if any(existing.id == item_id for existing in items):
            logger.warning("Skipping duplicate item %s in box %s", item_id, box_id)
            continue
        items.append(Item(id=item_id, name=name, tags=parse_tags(record.item_tags)))
    
    return [Box(id=box_id, items=items) for box_id, items in grouped.items()]
