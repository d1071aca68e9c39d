"""
Opportunity service - sales pipeline tracking
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.models.opportunity import Opportunity
from app.schemas.opportunity import OpportunityCreate, OpportunityUpdate


def list_opportunities(
    db: Session,
    status: Optional[str] = None,
    stage: Optional[str] = None,
    assigned_user_id: Optional[int] = None,
    search: Optional[str] = None,
) -> List[Opportunity]:
    """
    List opportunities newest first

    Archived opportunities only show up when asked for explicitly.
    """
    opportunities = db.query(Opportunity).order_by(Opportunity.created_at.desc(), Opportunity.id.desc()).all()

    if status and status != "all":
        opportunities = [o for o in opportunities if o.status == status]
    else:
        opportunities = [o for o in opportunities if o.status != "archived"]
    if stage and stage != "all":
        opportunities = [o for o in opportunities if o.stage == stage]
    if assigned_user_id is not None:
        opportunities = [o for o in opportunities if o.assigned_user_id == assigned_user_id]
    if search:
        needle = search.lower()
        opportunities = [
            o for o in opportunities
            if needle in o.title.lower() or needle in (o.company_name or "").lower()
        ]
    return opportunities


def get_opportunity_or_404(db: Session, opportunity_id: int) -> Opportunity:
    opportunity = db.query(Opportunity).filter(Opportunity.id == opportunity_id).first()
    if not opportunity:
        raise NotFound(f"Opportunity with id {opportunity_id} not found")
    return opportunity


def create_opportunity(db: Session, data: OpportunityCreate) -> Opportunity:
    opportunity = Opportunity(**data.model_dump())
    db.add(opportunity)
    db.commit()
    db.refresh(opportunity)
    return opportunity


def update_opportunity(db: Session, opportunity_id: int, data: OpportunityUpdate) -> Opportunity:
    opportunity = get_opportunity_or_404(db, opportunity_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(opportunity, field, value)
    db.commit()
    db.refresh(opportunity)
    return opportunity


def archive_opportunity(db: Session, opportunity_id: int) -> Opportunity:
    opportunity = get_opportunity_or_404(db, opportunity_id)
    opportunity.status = "archived"
    db.commit()
    db.refresh(opportunity)
    return opportunity
