"""
Email and email template schemas
"""
from datetime import datetime
from typing import Dict, Optional
from pydantic import BaseModel, Field, ConfigDict

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class EmailCreate(BaseModel):
    """
    Schema for sending an email

    Either pass subject and body directly, or a template id plus variables.
    Explicit subject/body win over the template's.
    """
    to: str = Field(..., pattern=EMAIL_PATTERN, description="Recipient address")
    subject: Optional[str] = None
    body: Optional[str] = None
    template: Optional[str] = Field(None, description="Template id, e.g. task-assignment")
    variables: Dict[str, str] = Field(default_factory=dict, description="Values for {key} placeholders")


class EmailOut(BaseModel):
    id: int
    to: str
    subject: str
    body: str
    template: Optional[str] = None
    status: str
    sent_at: Optional[datetime] = None
    opened_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EmailStats(BaseModel):
    sent_today: int
    open_rate: int
    pending: int


class EmailTemplateOut(BaseModel):
    id: str
    name: str
    subject: str
    body: str
    category: str
    assigned_user_id: Optional[int] = None


class TemplateRenderRequest(BaseModel):
    variables: Dict[str, str] = Field(default_factory=dict)


class RenderedTemplate(BaseModel):
    subject: str
    body: str
