"""
Role permission matrix service
"""
from typing import List

from sqlalchemy.orm import Session

from app.constants import ROLE_ADMIN, ROLES
from app.core.errors import BadRequest
from app.models.role_permission import RolePermission
from app.schemas.role_permission import PermissionActions
from app.services.access_service import find_permission


def list_role_permissions(db: Session) -> List[RolePermission]:
    return (
        db.query(RolePermission)
        .order_by(RolePermission.role.asc(), RolePermission.resource.asc())
        .all()
    )


def upsert_role_permission(
    db: Session,
    role: str,
    resource: str,
    actions: PermissionActions,
) -> RolePermission:
    """
    Create or replace the actions of a (role, resource) row

    Raises:
        BadRequest: For unknown roles, or for admin which bypasses the matrix
    """
    if role not in ROLES:
        raise BadRequest(f"Unknown role '{role}'")
    if role == ROLE_ADMIN:
        raise BadRequest("Admin permissions are not configurable")
    if not resource:
        raise BadRequest("Resource is required")

    permission = find_permission(db, role, resource)
    if permission is None:
        permission = RolePermission(role=role, resource=resource)
        db.add(permission)
    permission.actions = actions.model_dump()

    db.commit()
    db.refresh(permission)
    return permission
