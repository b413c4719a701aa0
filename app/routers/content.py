import logging
from fastapi import APIRouter, Depends, HTTPException
from app.core.dependencies import get_content_store, get_current_admin
from app.core.exceptions import NotFoundError, StorageError
from app.db.schemas.content import (
    ContentListResponse, ContentItemResponse, ContentUpdateRequest,
    ContentBatchRequest, ContentBatchResponse, ContentDeleteResponse,
)
from app.services.content_service import ContentStore
from app.services.revenue_ledger import MANUAL_REVENUE_KEY

logger = logging.getLogger(__name__)
router = APIRouter()

def _reject_reserved(key: str):
    if key == MANUAL_REVENUE_KEY:
        raise HTTPException(
            status_code=400,
            detail="manual_revenue is managed through /orders/adjust-revenue"
        )

@router.get("", response_model=ContentListResponse)
async def get_all_content(store: ContentStore = Depends(get_content_store)):
    try:
        content = await store.all()
    except StorageError:
        raise HTTPException(status_code=500, detail="Database error")

    content.pop(MANUAL_REVENUE_KEY, None)
    return ContentListResponse(content=content)

@router.get("/{key}", response_model=ContentItemResponse)
async def get_content(key: str, store: ContentStore = Depends(get_content_store)):
    if key == MANUAL_REVENUE_KEY:
        raise HTTPException(status_code=404, detail="Content not found")
    try:
        value = await store.get(key)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Content not found")
    except StorageError:
        raise HTTPException(status_code=500, detail="Database error")
    return ContentItemResponse(key=key, value=value)

@router.post("", response_model=ContentItemResponse)
async def update_content(
    request: ContentUpdateRequest,
    store: ContentStore = Depends(get_content_store),
    admin: str = Depends(get_current_admin),
):
    if not request.key:
        raise HTTPException(status_code=400, detail="Key is required")
    _reject_reserved(request.key)

    try:
        await store.put(request.key, request.value)
    except StorageError:
        raise HTTPException(status_code=500, detail="Database error")

    logger.info(f"Content '{request.key}' updated by {admin}")
    return ContentItemResponse(key=request.key, value=request.value)

@router.post("/batch", response_model=ContentBatchResponse)
async def batch_update_content(
    request: ContentBatchRequest,
    store: ContentStore = Depends(get_content_store),
    admin: str = Depends(get_current_admin),
):
    if request.updates is None:
        raise HTTPException(status_code=400, detail="Updates object is required")
    for key in request.updates:
        _reject_reserved(key)

    try:
        updated = await store.put_many(request.updates)
    except StorageError:
        raise HTTPException(status_code=500, detail="Database error")

    logger.info(f"{updated} content keys updated by {admin}")
    return ContentBatchResponse(updated=updated)

@router.delete("/{key}", response_model=ContentDeleteResponse)
async def delete_content(
    key: str,
    store: ContentStore = Depends(get_content_store),
    admin: str = Depends(get_current_admin),
):
    _reject_reserved(key)
    try:
        deleted = await store.delete(key)
    except StorageError:
        raise HTTPException(status_code=500, detail="Database error")
    return ContentDeleteResponse(deleted=deleted)
