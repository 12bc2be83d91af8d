"""Inventory repository - the session's authoritative box collection.

The repository is the only writer to the inventory store. Every save
replaces the stored collection wholesale; there is no merge or version
check, so concurrent writers overwrite each other (last writer wins).
Callers must not issue two saves at once.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from boxinventory.exceptions import StoreReadFailure, StoreWriteFailure
from boxinventory.schemas.box import Box
from boxinventory.schemas.item import Item
from boxinventory.services.records import flatten_boxes, group_records
from boxinventory.services.scan import normalize_box_id
from boxinventory.stores.base import InventoryStore

logger = logging.getLogger(__name__)


@dataclass
class LoadOutcome:
    """Boxes read from the store; ``warning`` is set when the read failed."""
    boxes: List[Box]
    warning: Optional[str] = None


@dataclass
class SaveOutcome:
    """Result of a save.

    ``persisted`` is False when nothing was kept (a new empty box). A
    ``warning`` means the store write failed while the in-memory collection
    already holds the new state.
    """
    persisted: bool
    warning: Optional[str] = None


@dataclass
class BoxDraft:
    """A box being edited. Changes stay local until the repository saves it."""
    box: Box
    is_new: bool

    def add_item(self, name: str, tags: Optional[Iterable[str]] = None) -> Item:
        item = Item(name=name, tags=list(tags or []))
        self.box = Box(id=self.box.id, items=[*self.box.items, item])
        return item

    def remove_item(self, item_id: str) -> Item:
        for item in self.box.items:
            if item.id == item_id:
                self.box = Box(id=self.box.id, items=[i for i in self.box.items if i.id != item_id])
                return item
        raise KeyError(item_id)

    def update_item(self, item_id: str, name: Optional[str] = None,
                    tags: Optional[Iterable[str]] = None) -> Item:
        """Replace an item's name and/or tags, keeping its id and position."""
        items = list(self.box.items)
        for index, item in enumerate(items):
            if item.id == item_id:
                updated = Item(
                    id=item.id,
                    name=item.name if name is None else name,
                    tags=item.tags if tags is None else list(tags),
                )
                items[index] = updated
                self.box = Box(id=self.box.id, items=items)
                return updated
        raise KeyError(item_id)


class InventoryRepository:
    """In-memory box collection backed by an :class:`InventoryStore`."""

    def __init__(self, store: InventoryStore):
        self.store = store
        self._boxes: List[Box] = []

    async def load(self) -> LoadOutcome:
        """Replace the in-memory collection with the store's contents.

        Read failures never propagate: the collection becomes empty and
        the outcome carries a warning.
        """
        try:
            records = await self.store.load_all()
            boxes = group_records(records)
        except StoreReadFailure as e:
            logger.warning("Could not load inventory: %s", e)
            self._boxes = []
            return LoadOutcome(boxes=[], warning=f"Could not load inventory: {e}")

        self._boxes = boxes
        logger.info("Loaded %d boxes from the inventory store", len(boxes))
        return LoadOutcome(boxes=self.get_all())

    def get_all(self) -> List[Box]:
        return [box.model_copy(deep=True) for box in self._boxes]

    def get(self, box_id: str) -> Optional[Box]:
        box_id = normalize_box_id(box_id)
        for box in self._boxes:
            if box.id == box_id:
                return box.model_copy(deep=True)
        return None

    def exists(self, box_id: str) -> bool:
        return self.get(box_id) is not None

    def open_box(self, box_id: str) -> BoxDraft:
        """Draft for an existing box, or an empty new one for an unknown id."""
        box = self.get(box_id)
        if box is not None:
            return BoxDraft(box=box, is_new=False)
        return BoxDraft(box=Box(id=box_id), is_new=True)

    def item_names(self) -> List[str]:
        """Distinct item names in collection order."""
        names = {}
        for box in self._boxes:
            for item in box.items:
                names.setdefault(item.name, None)
        return list(names)

    async def upsert_box(self, box: Box) -> SaveOutcome:
        """Replace the box with the same id, or append it, then write everything.

        A brand-new box without items is dropped: neither memory nor the
        store changes.
        """
        return await self.upsert_boxes([box])

    async def upsert_boxes(self, boxes: Iterable[Box]) -> SaveOutcome:
        """Upsert several boxes with a single wholesale write."""
        collection = list(self._boxes)
        changed = False
        for box in boxes:
            index = next((i for i, b in enumerate(collection) if b.id == box.id), None)
            if index is not None:
                collection[index] = box.model_copy(deep=True)
            elif box.items:
                collection.append(box.model_copy(deep=True))
            else:
                logger.info("Not saving new empty box %s", box.id)
                continue
            changed = True

        if not changed:
            return SaveOutcome(persisted=False)

        # Optimistic: memory moves to the new state before the store confirms
        self._boxes = collection
        try:
            await self.store.save_all(flatten_boxes(collection))
        except StoreWriteFailure as e:
            logger.warning("Could not save inventory: %s", e)
            return SaveOutcome(persisted=True, warning=f"Could not save inventory: {e}")

        logger.info("Saved %d boxes to the inventory store", len(collection))
        return SaveOutcome(persisted=True)
