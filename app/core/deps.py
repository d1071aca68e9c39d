"""
Dependencies and guards for FastAPI endpoints

Route guards run in declaration order:
get_current_user -> require_role / require_permission -> audited
"""
import json
import logging
from typing import Callable, Generator, Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import Forbidden, Unauthenticated
from app.core.security import decode_token
from app.db.session import SessionLocal
from app.models.user import User
from app.services.access_service import check_permission, check_role
from app.services.audit_service import AuditContext
from app.services.github_service import GithubSyncService, build_github_client

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

AUDIT_STATE_KEY = "audit_context"


def get_db() -> Generator:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory(request: Request) -> Callable[[], Session]:
    """Session factory for work that outlives the request (background tasks)"""
    return request.app.state.session_factory


def get_report_registry(request: Request):
    return request.app.state.report_registry


def get_template_registry(request: Request):
    return request.app.state.template_registry


def get_email_transport(request: Request):
    return request.app.state.email_transport


def get_github_client() -> Generator:
    """GitHub API client, closed after the request"""
    client = build_github_client(settings)
    try:
        yield client
    finally:
        client.close()


def get_github_service(
    db: Session = Depends(get_db),
    client=Depends(get_github_client),
) -> GithubSyncService:
    return GithubSyncService(db, client, settings.GITHUB_TOKEN)


def _resolve_user_id(
    x_user_id: Optional[str],
    credentials: Optional[HTTPAuthorizationCredentials],
) -> int:
    if x_user_id and settings.ALLOW_DEV_USER_HEADER:
        try:
            return int(x_user_id)
        except ValueError:
            raise Unauthenticated("Invalid user id header")

    if credentials is None:
        raise Unauthenticated()

    try:
        payload = decode_token(credentials.credentials)
        sub_value = payload.get("sub")
        if sub_value is None:
            raise Unauthenticated("Invalid authentication credentials")
        # JWT 'sub' is a string
        return int(sub_value)
    except (ValueError, TypeError):
        raise Unauthenticated("Invalid authentication credentials")


async def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="x-user-id"),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Get the acting user from the development header or a JWT bearer token
    """
    user_id = _resolve_user_id(x_user_id, credentials)

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        raise Unauthenticated("Invalid user or account disabled")

    return user


def require_role(min_role: str):
    """
    Dependency factory for role-threshold checks

    Usage:
        @router.get("/admin-only")
        async def endpoint(user: User = Depends(require_role("admin"))):
            ...
    """
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        decision = check_role(current_user.role, min_role)
        if not decision.allowed:
            raise Forbidden(decision.reason)
        return current_user
    return role_checker


def require_permission(resource: str, action: str):
    """
    Dependency factory for (resource, action) checks against the permission matrix
    """
    def permission_checker(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> User:
        decision = check_permission(db, current_user.role, resource, action)
        if not decision.allowed:
            logger.info(
                "Denied %s on %s for user=%s role=%s",
                action, resource, current_user.id, current_user.role,
            )
            raise Forbidden(decision.reason)
        return current_user
    return permission_checker


def audited(action: str, resource: str):
    """
    Dependency factory that marks a request for auditing

    Captures the audit context on request.state; AuditedRoute writes it once
    the response status is known.
    """
    async def audit_marker(
        request: Request,
        current_user: User = Depends(get_current_user),
    ) -> AuditContext:
        body = None
        raw = await request.body()
        if raw:
            try:
                body = json.loads(raw)
            except ValueError:
                body = None

        resource_id = None
        if request.path_params:
            resource_id = str(next(iter(request.path_params.values())))

        context = AuditContext(
            action=action,
            resource=resource,
            method=request.method,
            resource_id=resource_id,
            body=body,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
            user_id=current_user.id,
        )
        setattr(request.state, AUDIT_STATE_KEY, context)
        return context
    return audit_marker
