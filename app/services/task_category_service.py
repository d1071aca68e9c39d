"""
Task category service
"""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import Conflict, NotFound
from app.models.task import TaskCategory
from app.schemas.task import TaskCategoryCreate, TaskCategoryUpdate


def _name_taken(db: Session, name: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(TaskCategory).filter(func.lower(TaskCategory.name) == func.lower(name))
    if exclude_id is not None:
        query = query.filter(TaskCategory.id != exclude_id)
    return query.first() is not None


def list_categories(db: Session, active_only: Optional[bool] = None) -> List[TaskCategory]:
    query = db.query(TaskCategory)
    if active_only is not None:
        query = query.filter(TaskCategory.is_active == active_only)
    return query.order_by(TaskCategory.name.asc()).all()


def get_category_or_404(db: Session, category_id: int) -> TaskCategory:
    category = db.query(TaskCategory).filter(TaskCategory.id == category_id).first()
    if not category:
        raise NotFound(f"Task category with id {category_id} not found")
    return category


def create_category(db: Session, data: TaskCategoryCreate) -> TaskCategory:
    """
    Create a task category. Name is treated as case-insensitive unique.
    """
    if _name_taken(db, data.name):
        raise Conflict(f"Task category with name '{data.name}' already exists")

    category = TaskCategory(**data.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(db: Session, category_id: int, data: TaskCategoryUpdate) -> TaskCategory:
    category = get_category_or_404(db, category_id)
    update_dict = data.model_dump(exclude_unset=True)

    if update_dict.get("name") and _name_taken(db, update_dict["name"], exclude_id=category_id):
        raise Conflict(f"Task category with name '{update_dict['name']}' already exists")

    for field, value in update_dict.items():
        if value is not None:
            setattr(category, field, value)

    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int) -> None:
    category = get_category_or_404(db, category_id)
    db.delete(category)
    db.commit()
