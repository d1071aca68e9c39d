"""
Opportunity schemas
"""
from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict

OpportunityStatus = Literal["open", "won", "lost", "archived"]
OpportunityStage = Literal["prospecting", "qualification", "proposal", "negotiation", "closed"]


class OpportunityCreate(BaseModel):
    title: str = Field(..., min_length=1)
    company_name: Optional[str] = None
    value: float = Field(default=0.0, ge=0)
    status: OpportunityStatus = "open"
    stage: OpportunityStage = "prospecting"
    assigned_user_id: Optional[int] = None
    estimated_ship_date: Optional[date] = None
    actual_close_date: Optional[date] = None
    notes: Optional[str] = None


class OpportunityUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    company_name: Optional[str] = None
    value: Optional[float] = Field(None, ge=0)
    status: Optional[OpportunityStatus] = None
    stage: Optional[OpportunityStage] = None
    assigned_user_id: Optional[int] = None
    estimated_ship_date: Optional[date] = None
    actual_close_date: Optional[date] = None
    notes: Optional[str] = None


class OpportunityOut(BaseModel):
    id: int
    title: str
    company_name: Optional[str] = None
    value: float
    status: str
    stage: str
    assigned_user_id: Optional[int] = None
    estimated_ship_date: Optional[date] = None
    actual_close_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
