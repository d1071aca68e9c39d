"""
Dashboard endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.constants import RESOURCE_DASHBOARD
from app.core.deps import get_db, require_permission
from app.models.user import User
from app.services.dashboard_service import get_dashboard_stats

router = APIRouter()


@router.get("/stats")
async def dashboard_stats_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_DASHBOARD, "read")),
):
    return get_dashboard_stats(db)
