"""Scan routes."""
from fastapi import APIRouter, Depends, HTTPException, status

from boxinventory.dependencies import get_repository
from boxinventory.exceptions import InvalidScanPayload
from boxinventory.schemas.scan import ScanRequest, ScanResponse
from boxinventory.services.repository import InventoryRepository
from boxinventory.services.scan import normalize_box_id

router = APIRouter(prefix="/scan", tags=["Scan"])


@router.post("/", response_model=ScanResponse)
async def resolve_scan(
    scan_data: ScanRequest,
    repo: InventoryRepository = Depends(get_repository)
):
    """Resolve a decoded QR payload or a typed id to a box id."""
    try:
        box_id = normalize_box_id(scan_data.payload)
    except InvalidScanPayload as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return ScanResponse(box_id=box_id, exists=repo.exists(box_id))
