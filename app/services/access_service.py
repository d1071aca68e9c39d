"""
Access-control evaluator.

Two tiers:
- a fixed role hierarchy for coarse "at least this role" checks
- a per-(role, resource) permission matrix for CRUD checks

Both checks only decide; turning a deny into an HTTP error is the caller's job.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from app.constants import ROLE_ADMIN, ROLE_HIERARCHY
from app.models.role_permission import RolePermission


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "AccessDecision":
        return cls(allowed=False, reason=reason)


def role_level(role: Optional[str]) -> int:
    """Hierarchy level of a role; unknown roles are 0"""
    return ROLE_HIERARCHY.get(role or "", 0)


def check_role(user_role: Optional[str], required_role: str) -> AccessDecision:
    """Allow iff the user's level is at least the required role's level"""
    if role_level(user_role) >= role_level(required_role):
        return AccessDecision.allow()
    return AccessDecision.deny("Insufficient permissions")


def find_permission(db: Session, role: str, resource: str) -> Optional[RolePermission]:
    return (
        db.query(RolePermission)
        .filter(RolePermission.role == role, RolePermission.resource == resource)
        .first()
    )


def check_permission(db: Session, user_role: Optional[str], resource: str, action: str) -> AccessDecision:
    """
    Decide whether a role may perform an action on a resource

    Admin bypasses the permission table entirely. For any other role a missing
    (role, resource) row denies everything; an existing row allows an action
    only when its flag is exactly True.
    """
    if user_role == ROLE_ADMIN:
        return AccessDecision.allow()

    permission = find_permission(db, user_role, resource)
    if permission is None:
        return AccessDecision.deny("Access denied")

    actions = permission.actions or {}
    if actions.get(action) is True:
        return AccessDecision.allow()
    return AccessDecision.deny(f"Permission denied for {action} on {resource}")
