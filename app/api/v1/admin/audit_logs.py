"""
Audit log endpoints
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.constants import ROLE_ADMIN
from app.core.config import settings
from app.core.deps import get_db, require_role
from app.models.user import User
from app.schemas.audit_log import AuditLogPage
from app.services.audit_service import count_audit_logs, list_audit_logs

router = APIRouter()


@router.get("", response_model=AuditLogPage)
async def list_audit_logs_endpoint(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ROLE_ADMIN)),
):
    """Newest first, AUDIT_LOG_PAGE_SIZE entries per page"""
    page_size = settings.AUDIT_LOG_PAGE_SIZE
    return AuditLogPage(
        items=list_audit_logs(db, page=page, page_size=page_size),
        page=page,
        page_size=page_size,
        total=count_audit_logs(db),
    )
