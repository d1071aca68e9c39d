"""
Report endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response
from sqlalchemy.orm import Session

from app.constants import RESOURCE_REPORTS
from app.core.deps import (
    get_db,
    get_report_registry,
    get_session_factory,
    require_permission,
    audited,
)
from app.core.pipeline import AuditedRoute
from app.models.user import User
from app.schemas.report import ReportCreate, ReportOut, ReportTypeOut
from app.services.report_generators import ReportRegistry
from app.services.report_service import (
    create_report,
    delete_report,
    get_report_or_404,
    list_reports,
    read_report_content,
    report_filename,
    run_report_generation,
)

router = APIRouter(route_class=AuditedRoute)

MARKDOWN_MEDIA_TYPE = "text/markdown; charset=utf-8"


@router.get("", response_model=List[ReportOut])
async def list_reports_endpoint(
    status: Optional[str] = Query(None),
    type: Optional[str] = Query(None, description="Report type id"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_REPORTS, "read")),
):
    return list_reports(db, status=status, report_type=type)


@router.get("/types", response_model=List[ReportTypeOut])
async def list_report_types_endpoint(
    registry: ReportRegistry = Depends(get_report_registry),
    current_user: User = Depends(require_permission(RESOURCE_REPORTS, "read")),
):
    return [
        ReportTypeOut(type=generator.type, name=generator.name, description=generator.description)
        for generator in registry.types()
    ]


@router.get("/{report_id}", response_model=ReportOut)
async def get_report_endpoint(
    report_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_REPORTS, "read")),
):
    return get_report_or_404(db, report_id)


@router.get("/{report_id}/content")
async def get_report_content_endpoint(
    report_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_REPORTS, "read")),
):
    """Generated Markdown; 404 until the report has completed"""
    report = get_report_or_404(db, report_id)
    return Response(content=read_report_content(report), media_type=MARKDOWN_MEDIA_TYPE)


@router.get("/{report_id}/download")
async def download_report_endpoint(
    report_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_REPORTS, "read")),
):
    report = get_report_or_404(db, report_id)
    content = read_report_content(report)
    return Response(
        content=content,
        media_type=MARKDOWN_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{report_filename(report)}"'},
    )


@router.post("", response_model=ReportOut, status_code=201)
async def create_report_endpoint(
    report_data: ReportCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    registry: ReportRegistry = Depends(get_report_registry),
    session_factory=Depends(get_session_factory),
    current_user: User = Depends(require_permission(RESOURCE_REPORTS, "create")),
    _audit=Depends(audited("generate_report", RESOURCE_REPORTS)),
):
    """
    Request a report

    Returns the pending record right away; generation runs after the response
    and ends in 'completed' or 'failed'.
    """
    report = create_report(db, report_data, registry, actor_id=current_user.id)
    background_tasks.add_task(run_report_generation, session_factory, report.id, registry)
    return report


@router.delete("/{report_id}", status_code=204)
async def delete_report_endpoint(
    report_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_REPORTS, "delete")),
    _audit=Depends(audited("delete_report", RESOURCE_REPORTS)),
):
    delete_report(db, report_id)
    return Response(status_code=204)
