from typing import Dict, Optional
from pydantic import BaseModel

class ContentListResponse(BaseModel):
    success: bool = True
    content: Dict[str, Optional[str]]

class ContentItemResponse(BaseModel):
    success: bool = True
    key: str
    value: Optional[str] = None

class ContentUpdateRequest(BaseModel):
    key: Optional[str] = None
    value: Optional[str] = None

class ContentBatchRequest(BaseModel):
    updates: Optional[Dict[str, Optional[str]]] = None

class ContentBatchResponse(BaseModel):
    success: bool = True
    updated: int

class ContentDeleteResponse(BaseModel):
    success: bool = True
    deleted: bool
