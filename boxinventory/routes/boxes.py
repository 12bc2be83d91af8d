"""Box routes."""
import asyncio
from typing import List
import csv
import io

from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from boxinventory.dependencies import get_repository, get_write_lock
from boxinventory.exceptions import InvalidScanPayload
from boxinventory.schemas.box import (
    Box,
    BoxDetail,
    BoxSave,
    BoxSaveResponse,
    ImportResponse,
)
from boxinventory.schemas.item import ItemCreate, ItemUpdate
from boxinventory.schemas.record import InventoryRecord
from boxinventory.services.records import RECORD_FIELDS, flatten_boxes, group_records, is_placeholder
from boxinventory.services.repository import BoxDraft, InventoryRepository
from boxinventory.services.tag_suggestion import suggest_tags

router = APIRouter(prefix="/boxes", tags=["Boxes"])


def open_draft(repo: InventoryRepository, box_id: str) -> BoxDraft:
    """Open a box for editing, turning a blank id into a 400."""
    try:
        return repo.open_box(box_id)
    except InvalidScanPayload as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


def open_existing(repo: InventoryRepository, box_id: str) -> BoxDraft:
    draft = open_draft(repo, box_id)
    if draft.is_new:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Box not found"
        )
    return draft


async def save_draft(repo: InventoryRepository, draft: BoxDraft) -> BoxSaveResponse:
    """Save a draft. Callers hold ``write_lock`` from opening the draft to here."""
    outcome = await repo.upsert_box(draft.box)
    return BoxSaveResponse(box=draft.box, persisted=outcome.persisted, warning=outcome.warning)


@router.get("/", response_model=List[Box])
async def list_boxes(repo: InventoryRepository = Depends(get_repository)):
    """List all boxes in collection order."""
    return repo.get_all()


@router.get("/export/csv")
async def export_boxes_csv(repo: InventoryRepository = Depends(get_repository)):
    """Export all boxes as inventory records (one row per item) to a CSV file."""
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=RECORD_FIELDS)
    writer.writeheader()
    for record in flatten_boxes(repo.get_all()):
        writer.writerow(record.model_dump())
    
    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=boxes.csv"}
    )


@router.post("/import/csv", response_model=ImportResponse)
async def import_boxes_csv(
    file: UploadFile = File(...),
    repo: InventoryRepository = Depends(get_repository),
    write_lock: asyncio.Lock = Depends(get_write_lock)
):
    """Import boxes from a CSV of inventory records. Imported boxes replace existing ones by id."""
    if not file.filename.endswith('.csv'):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File must be a CSV"
        )
    
    content = await file.read()
    try:
        decoded = content.decode('utf-8-sig')
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File must be UTF-8 encoded"
        )
    reader = csv.DictReader(io.StringIO(decoded))
    
    records = []
    errors = []
    for row_num, row in enumerate(reader, start=2):
        record = InventoryRecord(**{
            name: (row.get(name) or '').strip() for name in RECORD_FIELDS
        })
        if not record.box_id:
            errors.append(f"Row {row_num}: box_id is required")
            continue
        if not record.item_name and not is_placeholder(record):
            errors.append(f"Row {row_num}: item_name is required")
            continue
        records.append(record)
    
    boxes = group_records(records)
    
    async with write_lock:
        outcome = await repo.upsert_boxes(boxes)
    
    return ImportResponse(
        imported=len([box for box in boxes if repo.exists(box.id)]),
        errors=errors,
        warning=outcome.warning
    )


@router.get("/{box_id}", response_model=BoxDetail)
async def get_box(box_id: str, repo: InventoryRepository = Depends(get_repository)):
    """Get a box with its items. Unknown ids give a new, unsaved, empty box."""
    draft = open_draft(repo, box_id)
    return BoxDetail(box=draft.box, is_new=draft.is_new)


@router.put("/{box_id}", response_model=BoxSaveResponse)
async def save_box(
    box_id: str,
    box_data: BoxSave,
    repo: InventoryRepository = Depends(get_repository),
    write_lock: asyncio.Lock = Depends(get_write_lock)
):
    """Save a box's full item list. A new box without items is not kept."""
    async with write_lock:
        draft = open_draft(repo, box_id)
        try:
            draft.box = Box(id=draft.box.id, items=box_data.items)
        except ValidationError as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=e.errors(include_url=False, include_context=False)
            )
        return await save_draft(repo, draft)


@router.post("/{box_id}/items", response_model=BoxSaveResponse, status_code=status.HTTP_201_CREATED)
async def add_item(
    box_id: str,
    item_data: ItemCreate,
    repo: InventoryRepository = Depends(get_repository),
    write_lock: asyncio.Lock = Depends(get_write_lock)
):
    """Add an item to a box (creating the box if needed) and save it."""
    tags = item_data.tags or []
    if not tags and item_data.auto_tag:
        tags = await suggest_tags(item_data.name)
    
    async with write_lock:
        draft = open_draft(repo, box_id)
        try:
            draft.add_item(item_data.name, tags)
        except ValidationError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Item name must not be empty"
            )
        return await save_draft(repo, draft)


@router.put("/{box_id}/items/{item_id}", response_model=BoxSaveResponse)
async def update_item(
    box_id: str,
    item_id: str,
    item_update: ItemUpdate,
    repo: InventoryRepository = Depends(get_repository),
    write_lock: asyncio.Lock = Depends(get_write_lock)
):
    """Change an item's name or tags in place."""
    async with write_lock:
        draft = open_existing(repo, box_id)
        try:
            draft.update_item(item_id, name=item_update.name, tags=item_update.tags)
        except KeyError:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found"
            )
        except ValidationError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Item name must not be empty"
            )
        return await save_draft(repo, draft)


@router.delete("/{box_id}/items/{item_id}", response_model=BoxSaveResponse)
async def remove_item(
    box_id: str,
    item_id: str,
    repo: InventoryRepository = Depends(get_repository),
    write_lock: asyncio.Lock = Depends(get_write_lock)
):
    """Take an item out of a box. The box itself stays, even when empty."""
    async with write_lock:
        draft = open_existing(repo, box_id)
        try:
            draft.remove_item(item_id)
        except KeyError:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found"
            )
        return await save_draft(repo, draft)
