"""
User schemas
"""
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict
from app.core.security import validate_password
from app.models.user import Role


class UserCreate(BaseModel):
    """Schema for creating a user"""
    username: str = Field(..., min_length=1, description="Unique username")
    email: Optional[str] = Field(None, description="Email address")
    first_name: Optional[str] = Field(None)
    last_name: Optional[str] = Field(None)
    role: Role = Field(default=Role.VIEW_ONLY, description="Role: admin, mod, gc, view_only")
    is_active: bool = Field(default=True)
    permissions: Optional[Dict[str, Any]] = Field(None, description="Per-user override blob")
    password: str = Field(..., description="Password (6-72 bytes)")

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, v):
        """Normalize and validate password"""
        return validate_password(v)


class UserUpdate(BaseModel):
    """Schema for updating a user"""
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[Role] = None
    is_active: Optional[bool] = None
    permissions: Optional[Dict[str, Any]] = None


class UserOut(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    is_active: bool
    permissions: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
