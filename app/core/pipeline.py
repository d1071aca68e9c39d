"""
After-handler request stage.

Guards (authentication, role and permission checks, audit marking) are
FastAPI dependencies in app.core.deps and run before the handler. AuditedRoute
runs after it: once the final response exists, a marked request with a
successful status gets its audit row queued as a background task.
"""
import logging
from typing import Any, Callable

from fastapi import Request, Response
from fastapi.routing import APIRoute
from starlette.background import BackgroundTask, BackgroundTasks

from app.core.deps import AUDIT_STATE_KEY
from app.services.audit_service import record_audit, should_record

logger = logging.getLogger(__name__)


def attach_background(response: Response, func: Callable[..., Any], *args: Any) -> None:
    """Queue func to run after the response, keeping tasks already attached"""
    existing = response.background
    if existing is None:
        response.background = BackgroundTask(func, *args)
    elif isinstance(existing, BackgroundTasks):
        existing.add_task(func, *args)
    else:
        response.background = BackgroundTasks(tasks=[existing, BackgroundTask(func, *args)])


class AuditedRoute(APIRoute):
    """Route class that records audit entries for successful marked requests"""

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def audited_route_handler(request: Request) -> Response:
            response = await original_route_handler(request)

            context = getattr(request.state, AUDIT_STATE_KEY, None)
            if context is not None and should_record(response.status_code, context.user_id):
                attach_background(
                    response,
                    record_audit,
                    request.app.state.session_factory,
                    context,
                )
            return response

        return audited_route_handler
