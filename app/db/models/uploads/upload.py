# app/models/upload.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
import uuid

class Upload(SQLModel, table=True):
    __tablename__ = "uploads"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: Optional[str] = Field(default=None, max_length=255, index=True)
    type: str = Field(max_length=10)
    filename: Optional[str] = Field(max_length=255, default=None)
    url: Optional[str] = Field(max_length=1024, default=None)
    text_content: Optional[str] = Field(default=None)
    thumbnail_url: Optional[str] = Field(max_length=1024, default=None)
    code: Optional[str] = Field(max_length=8, default=None, index=True)
    expires_at: Optional[datetime] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
