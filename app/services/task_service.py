"""
Task service - business logic for task management
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.models.task import Task
from app.schemas.task import TaskCreate, TaskUpdate
from app.utils.datetime_utils import to_naive_utc, utcnow


def _apply_status(task: Task, new_status: str) -> None:
    """Stamp completed_at when a task enters 'completed', clear it when it leaves"""
    if new_status == "completed" and task.status != "completed":
        task.completed_at = utcnow()
    elif new_status != "completed":
        task.completed_at = None
    task.status = new_status


def list_tasks(
    db: Session,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Task]:
    """
    List tasks newest first

    Filters are applied in-process after the full fetch; "all" means no filter.
    """
    tasks = db.query(Task).order_by(Task.created_at.desc(), Task.id.desc()).all()

    if status and status != "all":
        tasks = [task for task in tasks if task.status == status]
    if priority and priority != "all":
        tasks = [task for task in tasks if task.priority == priority]
    if search:
        needle = search.lower()
        tasks = [
            task for task in tasks
            if needle in task.title.lower() or needle in (task.description or "").lower()
        ]
    return tasks


def get_task(db: Session, task_id: int) -> Optional[Task]:
    """Get a task by ID"""
    return db.query(Task).filter(Task.id == task_id).first()


def get_task_or_404(db: Session, task_id: int) -> Task:
    task = get_task(db, task_id)
    if not task:
        raise NotFound(f"Task with id {task_id} not found")
    return task


def create_task(db: Session, task_data: TaskCreate, actor_id: Optional[int] = None) -> Task:
    """
    Create a new task

    Args:
        db: Database session
        task_data: Task creation data
        actor_id: ID of the user creating the task

    Returns:
        Created Task instance
    """
    data = task_data.model_dump()
    status = data.pop("status")
    data["due_date"] = to_naive_utc(data.get("due_date"))

    task = Task(**data, created_by=actor_id)
    task.status = "todo"
    _apply_status(task, status)

    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update_task(db: Session, task_id: int, task_data: TaskUpdate) -> Task:
    """
    Update a task; last write wins

    Raises:
        NotFound: If the task does not exist
    """
    task = get_task_or_404(db, task_id)

    update_dict = task_data.model_dump(exclude_unset=True)
    new_status = update_dict.pop("status", None)
    if "due_date" in update_dict:
        update_dict["due_date"] = to_naive_utc(update_dict["due_date"])

    for field, value in update_dict.items():
        setattr(task, field, value)
    if new_status is not None:
        _apply_status(task, new_status)

    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, task_id: int) -> None:
    task = get_task_or_404(db, task_id)
    db.delete(task)
    db.commit()
