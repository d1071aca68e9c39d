"""
Email endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from app.constants import RESOURCE_EMAILS
from app.core.deps import (
    get_db,
    get_email_transport,
    get_session_factory,
    get_template_registry,
    require_permission,
    audited,
)
from app.core.pipeline import AuditedRoute
from app.models.user import User
from app.schemas.email import (
    EmailCreate,
    EmailOut,
    EmailStats,
    EmailTemplateOut,
    TemplateRenderRequest,
    RenderedTemplate,
)
from app.services.email_service import create_email, deliver_email, email_stats, list_emails
from app.services.email_templates import TemplateRegistry

router = APIRouter(route_class=AuditedRoute)


@router.get("", response_model=List[EmailOut])
async def list_emails_endpoint(
    status: Optional[str] = Query(None, description="pending, sent, failed or all"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_EMAILS, "read")),
):
    return list_emails(db, status=status)


@router.get("/stats", response_model=EmailStats)
async def email_stats_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_EMAILS, "read")),
):
    """Sent today, open rate (percent of sent) and pending count"""
    return email_stats(db)


@router.get("/templates", response_model=List[EmailTemplateOut])
async def list_templates_endpoint(
    category: Optional[str] = Query(None, description="system or custom"),
    registry: TemplateRegistry = Depends(get_template_registry),
    current_user: User = Depends(require_permission(RESOURCE_EMAILS, "read")),
):
    return [EmailTemplateOut(**vars(template)) for template in registry.all(category)]


@router.post("/templates/{template_id}/render", response_model=RenderedTemplate)
async def render_template_endpoint(
    template_id: str,
    render_data: TemplateRenderRequest,
    registry: TemplateRegistry = Depends(get_template_registry),
    current_user: User = Depends(require_permission(RESOURCE_EMAILS, "read")),
):
    """Preview a template; unknown placeholders are left as written"""
    subject, body = registry.get_or_404(template_id).render(render_data.variables)
    return RenderedTemplate(subject=subject, body=body)


@router.post("", response_model=EmailOut, status_code=201)
async def send_email_endpoint(
    email_data: EmailCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    registry: TemplateRegistry = Depends(get_template_registry),
    session_factory=Depends(get_session_factory),
    transport=Depends(get_email_transport),
    current_user: User = Depends(require_permission(RESOURCE_EMAILS, "create")),
    _audit=Depends(audited("send_email", RESOURCE_EMAILS)),
):
    """
    Queue an email

    The email is returned as 'pending'; delivery and open tracking happen
    after the response.
    """
    email = create_email(db, email_data, registry, actor_id=current_user.id)
    background_tasks.add_task(deliver_email, session_factory, email.id, transport)
    return email
