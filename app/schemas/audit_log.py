"""
Audit log schemas
"""
from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, field_serializer


class AuditLogOut(BaseModel):
    """Audit entry. Datetimes in UTC."""
    id: int
    user_id: int
    action: str
    resource: str
    resource_id: Optional[str] = None
    old_values: Optional[Any] = None
    new_values: Optional[Any] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    def _ser_datetime(self, dt):
        from app.utils.datetime_utils import iso_utc
        return iso_utc(dt)


class AuditLogPage(BaseModel):
    items: List[AuditLogOut]
    page: int
    page_size: int
    total: int
