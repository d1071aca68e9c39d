"""
Central error handling for Wish Desk CRM Backend
"""
import logging
from typing import Any, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class Unauthenticated(HTTPException):
    """No acting user, or the user could not be resolved"""

    def __init__(self, detail: Any = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class Forbidden(HTTPException):
    """Acting user lacks the role level or the resource permission"""

    def __init__(self, detail: Any = "Access denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class BadRequest(HTTPException):
    def __init__(self, detail: Any = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: Any = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: Any = "Conflict"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UpstreamError(HTTPException):
    """An external API call failed"""

    def __init__(self, detail: Any = "Upstream service error"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


def _error_body(status_code: int, detail: Any, path: str, errors: Optional[list] = None) -> dict:
    body = {
        "error": True,
        "status_code": status_code,
        "detail": detail,
        "path": path,
    }
    if errors is not None:
        body["errors"] = errors
    return body


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle HTTPException with consistent JSON response format

    Args:
        request: FastAPI request object
        exc: HTTPException instance

    Returns:
        JSONResponse with error details
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, exc.detail, str(request.url.path)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle schema validation failures as 400 Bad Request

    Field-level errors are omitted in production.
    """
    from app.core.config import settings

    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(400, "Validation error: Invalid request data", str(request.url.path)),
        )

    # ctx may carry exception instances, which are not JSON serializable
    errors = []
    for e in exc.errors():
        err = dict(e)
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {
                k: (str(v) if not isinstance(v, (str, int, float, bool, type(None))) else v)
                for k, v in err["ctx"].items()
            }
        err.pop("input", None)
        errors.append(err)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(400, "Validation error", str(request.url.path), errors=errors),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions as a generic 500

    The exception is logged with its traceback; nothing internal is returned.
    """
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(500, "Internal server error", str(request.url.path)),
    )
