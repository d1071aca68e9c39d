"""
Role permission matrix model
"""
from sqlalchemy import Column, Integer, String, DateTime, JSON, UniqueConstraint
from app.db.base import Base
from app.utils.datetime_utils import utcnow


class RolePermission(Base):
    __tablename__ = "role_permissions"

    id = Column(Integer, primary_key=True, index=True)
    role = Column(String, nullable=False, index=True)
    resource = Column(String, nullable=False, index=True)
    # {"create": bool, "read": bool, "update": bool, "delete": bool}
    actions = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("role", "resource", name="uq_role_permission_role_resource"),
    )
