"""
Role permission matrix schemas
"""
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class PermissionActions(BaseModel):
    create: bool = False
    read: bool = False
    update: bool = False
    delete: bool = False


class RolePermissionUpsert(BaseModel):
    """Body of PUT /admin/role-permissions/{role}/{resource}"""
    actions: PermissionActions = Field(default_factory=PermissionActions)


class RolePermissionOut(BaseModel):
    id: int
    role: str
    resource: str
    actions: PermissionActions
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
