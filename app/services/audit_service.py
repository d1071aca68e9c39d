"""
Audit logging service
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog
from app.utils.datetime_utils import utcnow
from app.utils.json_serializer import sanitize_for_json

logger = logging.getLogger(__name__)

OLD_VALUE_METHODS = ("PUT", "PATCH")
NEW_VALUE_METHODS = ("POST", "PUT", "PATCH")


@dataclass
class AuditContext:
    """What an audited request did, captured before the handler runs"""
    action: str
    resource: str
    method: str
    resource_id: Optional[str] = None
    body: Any = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    user_id: Optional[int] = None


def should_record(status_code: int, user_id: Optional[int]) -> bool:
    """Only successful requests with an acting user are audited"""
    return user_id is not None and status_code < 400


def split_values(method: str, body: Any) -> Tuple[Any, Any]:
    """
    Map the request body onto (old_values, new_values)

    PUT/PATCH bodies count as both; POST bodies only as new values.
    """
    method = method.upper()
    old_values = body if method in OLD_VALUE_METHODS else None
    new_values = body if method in NEW_VALUE_METHODS else None
    return old_values, new_values


def log_audit(
    db: Session,
    user_id: int,
    action: str,
    resource: str,
    resource_id: Optional[str] = None,
    old_values: Any = None,
    new_values: Any = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> AuditLog:
    """
    Create an audit log entry

    Args:
        db: Database session
        user_id: ID of the user performing the action
        action: Caller-supplied action label (e.g. "create_task")
        resource: Resource label (e.g. "tasks")
        resource_id: Route id of the affected entity (optional)
        old_values / new_values: JSON-compatible payloads (optional)

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        user_id=user_id,
        action=action,
        resource=resource,
        resource_id=str(resource_id) if resource_id is not None else None,
        old_values=sanitize_for_json(old_values),
        new_values=sanitize_for_json(new_values),
        ip_address=ip_address,
        user_agent=user_agent,
        created_at=utcnow(),
    )
    db.add(audit_log)
    db.commit()
    db.refresh(audit_log)
    return audit_log


def record_audit(session_factory: Callable[[], Session], context: AuditContext) -> Optional[AuditLog]:
    """
    Best-effort background write of one audit row.

    Runs after the response has been sent. Any failure is logged and
    swallowed; audit completeness is not guaranteed.
    """
    old_values, new_values = split_values(context.method, context.body)
    db = session_factory()
    try:
        return log_audit(
            db=db,
            user_id=context.user_id,
            action=context.action,
            resource=context.resource,
            resource_id=context.resource_id,
            old_values=old_values,
            new_values=new_values,
            ip_address=context.ip_address,
            user_agent=context.user_agent,
        )
    except Exception:
        logger.error(
            "Failed to record audit entry action=%s resource=%s user=%s",
            context.action, context.resource, context.user_id, exc_info=True,
        )
        db.rollback()
        return None
    finally:
        db.close()


def list_audit_logs(db: Session, page: int = 1, page_size: int = 100) -> List[AuditLog]:
    """Newest first, fixed page size"""
    offset = max(page - 1, 0) * page_size
    return (
        db.query(AuditLog)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .offset(offset)
        .limit(page_size)
        .all()
    )


def count_audit_logs(db: Session) -> int:
    return db.query(AuditLog).count()
