"""
Role permission matrix endpoints
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.constants import ROLE_ADMIN
from app.core.deps import get_db, require_role, audited
from app.core.pipeline import AuditedRoute
from app.models.user import User
from app.schemas.role_permission import RolePermissionUpsert, RolePermissionOut
from app.services.role_permission_service import list_role_permissions, upsert_role_permission

router = APIRouter(route_class=AuditedRoute)


@router.get("", response_model=List[RolePermissionOut])
async def list_role_permissions_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ROLE_ADMIN)),
):
    return list_role_permissions(db)


@router.put("/{role}/{resource}", response_model=RolePermissionOut)
async def upsert_role_permission_endpoint(
    role: str,
    resource: str,
    data: RolePermissionUpsert,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ROLE_ADMIN)),
    _audit=Depends(audited("update_role_permission", "role-permissions")),
):
    """Create or replace the actions a role has on a resource"""
    return upsert_role_permission(db, role, resource, data.actions)
