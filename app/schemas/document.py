"""
Documentation schemas
"""
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict

DocumentStatus = Literal["draft", "published"]


class DocumentCreate(BaseModel):
    title: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    content: str
    author: str = Field(..., min_length=1)
    status: DocumentStatus = "draft"


class DocumentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = None
    author: Optional[str] = None
    status: Optional[DocumentStatus] = None


class DocumentOut(BaseModel):
    id: int
    title: str
    category: str
    content: str
    author: str
    status: str
    file_path: Optional[str] = None
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
