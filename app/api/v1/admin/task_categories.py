"""
Task category administration endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.constants import ROLE_ADMIN
from app.core.deps import get_db, require_role, audited
from app.core.pipeline import AuditedRoute
from app.models.user import User
from app.schemas.task import TaskCategoryCreate, TaskCategoryUpdate, TaskCategoryOut
from app.services.task_category_service import (
    list_categories,
    create_category,
    update_category,
    delete_category,
)

router = APIRouter(route_class=AuditedRoute)


@router.get("", response_model=List[TaskCategoryOut])
async def list_categories_endpoint(
    active_only: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ROLE_ADMIN)),
):
    return list_categories(db, active_only=active_only)


@router.post("", response_model=TaskCategoryOut, status_code=201)
async def create_category_endpoint(
    data: TaskCategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ROLE_ADMIN)),
    _audit=Depends(audited("create_task_category", "task-categories")),
):
    return create_category(db, data)


@router.put("/{category_id}", response_model=TaskCategoryOut)
async def update_category_endpoint(
    category_id: int,
    data: TaskCategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ROLE_ADMIN)),
    _audit=Depends(audited("update_task_category", "task-categories")),
):
    return update_category(db, category_id, data)


@router.delete("/{category_id}", status_code=204)
async def delete_category_endpoint(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ROLE_ADMIN)),
    _audit=Depends(audited("delete_task_category", "task-categories")),
):
    delete_category(db, category_id)
    return Response(status_code=204)
