"""
Task and task category schemas
"""
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict

TaskStatus = Literal["todo", "in_progress", "completed", "cancelled"]
TaskPriority = Literal["low", "medium", "high", "urgent"]


class TaskCreate(BaseModel):
    """Schema for creating a task"""
    title: str = Field(..., min_length=1, description="Task title")
    description: Optional[str] = Field(None, description="Task details")
    status: TaskStatus = Field(default="todo")
    priority: TaskPriority = Field(default="medium")
    category: Optional[str] = Field(None, description="Task category name")
    assigned_to: Optional[int] = Field(None, description="Assignee user ID")
    due_date: Optional[datetime] = None
    linked_company_id: Optional[int] = None
    linked_opportunity_id: Optional[int] = None


class TaskUpdate(BaseModel):
    """Schema for updating a task; only provided fields change"""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    category: Optional[str] = None
    assigned_to: Optional[int] = None
    due_date: Optional[datetime] = None
    linked_company_id: Optional[int] = None
    linked_opportunity_id: Optional[int] = None


class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    category: Optional[str] = None
    assigned_to: Optional[int] = None
    created_by: Optional[int] = None
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    linked_company_id: Optional[int] = None
    linked_opportunity_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Category name")
    description: Optional[str] = None
    color: str = Field(default="#6b7280", description="Display color")
    is_active: bool = True


class TaskCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None
    is_active: Optional[bool] = None


class TaskCategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    color: str
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
