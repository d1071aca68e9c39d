"""
User model
"""
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON
from app.db.base import Base
from app.utils.datetime_utils import utcnow


class Role(str, enum.Enum):
    ADMIN = "admin"
    MOD = "mod"
    GC = "gc"
    VIEW_ONLY = "view_only"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    role = Column(String, nullable=False, default=Role.VIEW_ONLY.value)
    # Soft-delete flag; users are never hard-deleted
    is_active = Column(Boolean, nullable=False, default=True)
    # Free-form per-user override blob, informational only
    permissions = Column(JSON, nullable=True)
    password_hash = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
