"""Tag suggestion routes."""
from fastapi import APIRouter, HTTPException, Query, status

from boxinventory.schemas.scan import TagSuggestionResponse
from boxinventory.services.tag_suggestion import suggest_tags

router = APIRouter(prefix="/tags", tags=["Tags"])


@router.get("/suggest", response_model=TagSuggestionResponse)
async def suggest_item_tags(name: str = Query(..., description="Item name")):
    """
    Suggest searchable tags for an item name.
    
    The list is empty when the suggestion service is not configured or fails.
    """
    if not name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Item name must not be empty"
        )
    return TagSuggestionResponse(name=name, tags=await suggest_tags(name))
