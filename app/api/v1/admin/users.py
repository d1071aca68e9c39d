"""
User administration endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.constants import ROLE_ADMIN
from app.core.deps import get_db, require_role, audited
from app.core.pipeline import AuditedRoute
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate, UserOut
from app.services.user_service import (
    list_users,
    get_user_or_404,
    create_user,
    update_user,
    deactivate_user,
)

router = APIRouter(route_class=AuditedRoute)


@router.get("", response_model=List[UserOut])
async def list_users_endpoint(
    active_only: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ROLE_ADMIN)),
):
    return list_users(db, active_only=active_only)


@router.get("/{user_id}", response_model=UserOut)
async def get_user_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ROLE_ADMIN)),
):
    return get_user_or_404(db, user_id)


@router.post("", response_model=UserOut, status_code=201)
async def create_user_endpoint(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ROLE_ADMIN)),
    _audit=Depends(audited("create_user", "users")),
):
    return create_user(db, user_data)


@router.put("/{user_id}", response_model=UserOut)
async def update_user_endpoint(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ROLE_ADMIN)),
    _audit=Depends(audited("update_user", "users")),
):
    """Update profile, role, permissions override or active flag"""
    return update_user(db, user_id, user_data)


@router.delete("/{user_id}", response_model=UserOut)
async def deactivate_user_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ROLE_ADMIN)),
    _audit=Depends(audited("deactivate_user", "users")),
):
    """Users are deactivated, never removed"""
    return deactivate_user(db, user_id)
