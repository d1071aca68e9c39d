"""
User service - administration of CRM users
"""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import Conflict, NotFound
from app.core.security import hash_password
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate


def list_users(db: Session, active_only: Optional[bool] = None) -> List[User]:
    query = db.query(User)
    if active_only is not None:
        query = query.filter(User.is_active == active_only)
    return query.order_by(User.username.asc()).all()


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_or_404(db: Session, user_id: int) -> User:
    user = get_user(db, user_id)
    if not user:
        raise NotFound(f"User with id {user_id} not found")
    return user


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.username) == func.lower(username)).first()


def create_user(db: Session, user_data: UserCreate) -> User:
    """
    Create a new user

    Raises:
        Conflict: If the username is already taken (case-insensitive)
    """
    if get_user_by_username(db, user_data.username):
        raise Conflict(f"User with username '{user_data.username}' already exists")

    user = User(
        username=user_data.username,
        email=user_data.email,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        role=user_data.role.value,
        is_active=user_data.is_active,
        permissions=user_data.permissions or {},
        password_hash=hash_password(user_data.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user_id: int, user_data: UserUpdate) -> User:
    user = get_user_or_404(db, user_id)

    for field, value in user_data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if field == "role":
            value = value.value if hasattr(value, "value") else value
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user


def deactivate_user(db: Session, user_id: int) -> User:
    """Soft delete: users are deactivated, never removed"""
    user = get_user_or_404(db, user_id)
    user.is_active = False
    db.commit()
    db.refresh(user)
    return user
