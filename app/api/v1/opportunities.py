"""
Opportunity endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.constants import RESOURCE_OPPORTUNITIES
from app.core.deps import get_db, require_permission, audited
from app.core.pipeline import AuditedRoute
from app.models.user import User
from app.schemas.opportunity import OpportunityCreate, OpportunityUpdate, OpportunityOut
from app.services.opportunity_service import (
    list_opportunities,
    get_opportunity_or_404,
    create_opportunity,
    update_opportunity,
    archive_opportunity,
)

router = APIRouter(route_class=AuditedRoute)


@router.get("", response_model=List[OpportunityOut])
async def list_opportunities_endpoint(
    status: Optional[str] = Query(None),
    stage: Optional[str] = Query(None),
    assigned_user_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_OPPORTUNITIES, "read")),
):
    """List opportunities; archived ones only with status=archived"""
    return list_opportunities(
        db,
        status=status,
        stage=stage,
        assigned_user_id=assigned_user_id,
        search=search,
    )


@router.get("/{opportunity_id}", response_model=OpportunityOut)
async def get_opportunity_endpoint(
    opportunity_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_OPPORTUNITIES, "read")),
):
    return get_opportunity_or_404(db, opportunity_id)


@router.post("", response_model=OpportunityOut, status_code=201)
async def create_opportunity_endpoint(
    data: OpportunityCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_OPPORTUNITIES, "create")),
    _audit=Depends(audited("create_opportunity", RESOURCE_OPPORTUNITIES)),
):
    return create_opportunity(db, data)


@router.put("/{opportunity_id}", response_model=OpportunityOut)
async def update_opportunity_endpoint(
    opportunity_id: int,
    data: OpportunityUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_OPPORTUNITIES, "update")),
    _audit=Depends(audited("update_opportunity", RESOURCE_OPPORTUNITIES)),
):
    return update_opportunity(db, opportunity_id, data)


@router.delete("/{opportunity_id}", response_model=OpportunityOut)
async def archive_opportunity_endpoint(
    opportunity_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_OPPORTUNITIES, "delete")),
    _audit=Depends(audited("archive_opportunity", RESOURCE_OPPORTUNITIES)),
):
    """Opportunities are archived rather than deleted"""
    return archive_opportunity(db, opportunity_id)
