"""
Report service - report records and the background generation lifecycle

Lifecycle: pending -> processing -> completed | failed. Generation runs after
the creating request has returned; errors end up in the record's status.
"""
import logging
import math
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from app.constants import REPORT_COMPLETED, REPORT_FAILED, REPORT_PENDING, REPORT_PROCESSING
from app.core.config import settings
from app.core.errors import BadRequest, NotFound
from app.models.report import Report
from app.schemas.report import ReportCreate
from app.services.report_generators import ReportRegistry
from app.utils.datetime_utils import utcnow
from app.utils.file_store import delete_text_file, read_text_file, slugify, write_text_file

logger = logging.getLogger(__name__)

CHARS_PER_PAGE = 3000


def estimate_page_count(content: str) -> int:
    return math.ceil(len(content) / CHARS_PER_PAGE)


def report_filename(report: Report) -> str:
    return f"report-{report.id}-{slugify(report.type)}.md"


def list_reports(db: Session, status: Optional[str] = None, report_type: Optional[str] = None) -> List[Report]:
    reports = db.query(Report).order_by(Report.created_at.desc(), Report.id.desc()).all()
    if status and status != "all":
        reports = [r for r in reports if r.status == status]
    if report_type:
        reports = [r for r in reports if r.type == report_type]
    return reports


def get_report_or_404(db: Session, report_id: int) -> Report:
    report = db.query(Report).filter(Report.id == report_id).first()
    if not report:
        raise NotFound(f"Report with id {report_id} not found")
    return report


def create_report(
    db: Session,
    report_data: ReportCreate,
    registry: ReportRegistry,
    actor_id: Optional[int] = None,
) -> Report:
    """
    Insert a pending report record

    Raises:
        BadRequest: Report type is not registered
    """
    if report_data.type not in registry:
        raise BadRequest(f"Unknown report type '{report_data.type}'")

    report = Report(
        title=report_data.title,
        type=report_data.type,
        description=report_data.description,
        parameters=report_data.parameters,
        status=REPORT_PENDING,
        created_by=actor_id,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    return report


def delete_report(db: Session, report_id: int) -> None:
    """Remove the record and its generated file"""
    report = get_report_or_404(db, report_id)
    file_path = report.file_path
    db.delete(report)
    db.commit()
    delete_text_file(file_path)

def run_report_generation(
    session_factory: Callable[[], Session],
    report_id: int,
    registry: ReportRegistry,
    reports_dir: Optional[str] = None,
) -> Optional[str]:
    """
    Generate one report and persist the outcome

    Always leaves the record in a terminal state (completed or failed) once it
    has been picked up. Returns the final status, or None if the record is gone.
    """
    db = session_factory()
    try:
        report = db.query(Report).filter(Report.id == report_id).first()
        if report is None:
            logger.warning("Report %s not found, skipping generation", report_id)
            return None

        report.status = REPORT_PROCESSING
        db.commit()

        try:
            generator = registry.get(report.type)
            if generator is None:
                raise ValueError(f"No generator registered for '{report.type}'")
            content = generator.generate(db, dict(report.parameters or {}))
            file_path = write_text_file(reports_dir or settings.REPORTS_DIR, report_filename(report), content)
        except Exception:
            logger.error("Report %s (%s) generation failed", report_id, report.type, exc_info=True)
            db.rollback()
            report.status = REPORT_FAILED
            report.file_path = None
            report.page_count = None
            db.commit()
            return REPORT_FAILED

        report.status = REPORT_COMPLETED
        report.file_path = file_path
        report.page_count = estimate_page_count(content)
        report.completed_at = utcnow()
        db.commit()
        logger.info("Report %s completed: %s (%s pages)", report_id, file_path, report.page_count)
        return REPORT_COMPLETED
    finally:
        db.close()


def read_report_content(report: Report) -> str:
    """
    Raises:
        NotFound: Report has not completed or its file is missing
    """
    if report.status != REPORT_COMPLETED or not report.file_path:
        raise NotFound("Report content is not available")
    try:
        return read_text_file(report.file_path)
    except FileNotFoundError:
        logger.warning("Report %s file missing at %s", report.id, report.file_path)
        raise NotFound("Report file not found")
