# app/schemas/upload.py
from pydantic import BaseModel
from typing import List, Literal, Optional
from datetime import datetime

class UploadResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    type: Literal["file", "image", "text"]
    filename: Optional[str] = None
    url: Optional[str] = None
    text_content: Optional[str] = None
    thumbnail_url: Optional[str] = None
    code: Optional[str] = None
    expires_at: Optional[datetime] = None
    created_at: datetime

class UploadPageResponse(BaseModel):
    items: List[UploadResponse]
    page: int
    page_size: int
    has_more: bool

class AnonymousUploadResponse(BaseModel):
    code: str
    success: bool = True

class DeleteResponse(BaseModel):
    success: bool = True
