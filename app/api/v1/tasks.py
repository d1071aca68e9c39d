"""
Task endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.constants import RESOURCE_TASKS
from app.core.deps import get_db, require_permission, audited
from app.core.pipeline import AuditedRoute
from app.models.user import User
from app.schemas.task import TaskCreate, TaskUpdate, TaskOut
from app.services.task_service import (
    list_tasks,
    get_task_or_404,
    create_task,
    update_task,
    delete_task,
)

router = APIRouter(route_class=AuditedRoute)


@router.get("", response_model=List[TaskOut])
async def list_tasks_endpoint(
    status: Optional[str] = Query(None, description="Filter by status, 'all' for no filter"),
    priority: Optional[str] = Query(None, description="Filter by priority, 'all' for no filter"),
    search: Optional[str] = Query(None, description="Case-insensitive match on title/description"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_TASKS, "read")),
):
    """List tasks newest first"""
    return list_tasks(db, status=status, priority=priority, search=search)


@router.get("/{task_id}", response_model=TaskOut)
async def get_task_endpoint(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_TASKS, "read")),
):
    return get_task_or_404(db, task_id)


@router.post("", response_model=TaskOut, status_code=201)
async def create_task_endpoint(
    task_data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_TASKS, "create")),
    _audit=Depends(audited("create_task", RESOURCE_TASKS)),
):
    """Create a task; new tasks start as 'todo' unless a status is given"""
    return create_task(db, task_data, actor_id=current_user.id)


@router.put("/{task_id}", response_model=TaskOut)
async def update_task_endpoint(
    task_id: int,
    task_data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_TASKS, "update")),
    _audit=Depends(audited("update_task", RESOURCE_TASKS)),
):
    return update_task(db, task_id, task_data)


@router.delete("/{task_id}", status_code=204)
async def delete_task_endpoint(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_TASKS, "delete")),
    _audit=Depends(audited("delete_task", RESOURCE_TASKS)),
):
    delete_task(db, task_id)
    return Response(status_code=204)
