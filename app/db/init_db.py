"""
Database initialization
Creates tables, the initial admin account and the default permission matrix
"""
import logging
from typing import Dict

from sqlalchemy.orm import Session

from app.constants import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_READ,
    ACTION_UPDATE,
    RESOURCE_DOCS,
    RESOURCE_EMAILS,
    RESOURCE_GITHUB,
    RESOURCE_OPPORTUNITIES,
    RESOURCE_TASKS,
    RESOURCES,
    ROLE_ADMIN,
    ROLE_GC,
    ROLE_MOD,
    ROLE_VIEW_ONLY,
)
from app.core.config import settings
from app.core.security import hash_password
from app.db.base import Base
from app.models.role_permission import RolePermission
from app.models.user import User

logger = logging.getLogger(__name__)

GC_EDITABLE = (RESOURCE_TASKS, RESOURCE_OPPORTUNITIES, RESOURCE_EMAILS, RESOURCE_DOCS)


def _actions(create: bool = False, read: bool = True, update: bool = False, delete: bool = False) -> Dict[str, bool]:
    return {ACTION_CREATE: create, ACTION_READ: read, ACTION_UPDATE: update, ACTION_DELETE: delete}


def default_permission_matrix() -> Dict[str, Dict[str, Dict[str, bool]]]:
    """role -> resource -> actions for every non-admin role"""
    matrix: Dict[str, Dict[str, Dict[str, bool]]] = {ROLE_MOD: {}, ROLE_GC: {}, ROLE_VIEW_ONLY: {}}
    for resource in RESOURCES:
        matrix[ROLE_MOD][resource] = _actions(True, True, True, resource != RESOURCE_GITHUB)
        editable = resource in GC_EDITABLE
        matrix[ROLE_GC][resource] = _actions(create=editable, update=editable)
        matrix[ROLE_VIEW_ONLY][resource] = _actions()
    return matrix


def create_tables(bind) -> None:
    # Register every model on Base.metadata
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=bind)


def seed_permissions(db: Session) -> int:
    """Insert the default matrix when the table is empty; returns rows added"""
    if db.query(RolePermission).first():
        return 0
    added = 0
    for role, resources in default_permission_matrix().items():
        for resource, actions in resources.items():
            db.add(RolePermission(role=role, resource=resource, actions=actions))
            added += 1
    db.commit()
    logger.info("Seeded %s default role permission rows", added)
    return added


def bootstrap_admin(db: Session) -> bool:
    """Create the initial admin account unless an admin already exists"""
    if db.query(User).filter(User.role == ROLE_ADMIN).first():
        logger.info("Admin user already exists, skipping initial bootstrap")
        return False

    admin = User(
        username=settings.INITIAL_ADMIN_USERNAME,
        first_name="System",
        last_name="Administrator",
        role=ROLE_ADMIN,
        is_active=True,
        password_hash=hash_password(settings.INITIAL_ADMIN_PASSWORD),
    )
    db.add(admin)
    db.commit()
    logger.info("Initial admin user created: username=%s", admin.username)
    logger.info("Password: [set via INITIAL_ADMIN_PASSWORD environment variable]")
    return True
