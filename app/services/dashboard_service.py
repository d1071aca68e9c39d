"""
Dashboard service - headline counters
"""
from typing import Dict

from sqlalchemy.orm import Session

from app.constants import EMAIL_SENT, REPORT_COMPLETED
from app.models.document import Document
from app.models.email import Email
from app.models.report import Report
from app.models.task import Task


def get_dashboard_stats(db: Session) -> Dict[str, int]:
    tasks = db.query(Task).all()
    return {
        "active_tasks": len([t for t in tasks if t.status not in ("completed", "cancelled")]),
        "emails_sent": db.query(Email).filter(Email.status == EMAIL_SENT).count(),
        "reports_generated": db.query(Report).filter(Report.status == REPORT_COMPLETED).count(),
        "documentation_count": db.query(Document).count(),
    }
