"""
Report schemas
"""
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict


class ReportCreate(BaseModel):
    title: str = Field(..., min_length=1)
    type: str = Field(..., description="Registered report type id, e.g. task-performance")
    description: Optional[str] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)


class ReportOut(BaseModel):
    id: int
    title: str
    type: str
    description: Optional[str] = None
    status: str
    parameters: Optional[Dict[str, Any]] = None
    file_path: Optional[str] = None
    page_count: Optional[int] = None
    created_at: datetime
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReportTypeOut(BaseModel):
    type: str
    name: str
    description: str
