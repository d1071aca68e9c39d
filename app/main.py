"""
Wish Desk CRM Backend - Main Application Entry Point
"""
import logging
from urllib.parse import urlparse, urlunparse

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException

from app.api.router import api_router
from app.core.config import settings
from app.core.errors import (
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from app.core.logging import setup_logging
from app.db.init_db import bootstrap_admin, create_tables, seed_permissions
from app.db.session import SessionLocal, engine
from app.services.email_service import build_transport
from app.services.email_templates import build_template_registry
from app.services.report_generators import build_report_registry

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


def _mask_database_url(url: str) -> str:
    """Mask password in DATABASE_URL for safe logging; show full path for sqlite."""
    try:
        parsed = urlparse(url)
        if parsed.scheme.startswith("sqlite"):
            return url
        if parsed.password:
            netloc = f"{parsed.username}:****@{parsed.hostname or ''}"
            if parsed.port:
                netloc += f":{parsed.port}"
            return urlunparse(parsed._replace(netloc=netloc))
    except ValueError:
        return "***"
    return url


# Create FastAPI app
app = FastAPI(
    title="Wish Desk CRM Backend",
    description="Tasks, email, reports, documentation, GitHub mirror and role-based administration",
    version=settings.VERSION or "1.0.0"
)

# Shared services; tests swap session_factory for their own
app.state.session_factory = SessionLocal
app.state.report_registry = build_report_registry()
app.state.template_registry = build_template_registry()
app.state.email_transport = build_transport(settings)

# Configure CORS - must be before other middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include all API routes under /api/v1
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup_log_config() -> None:
    masked = _mask_database_url(settings.DATABASE_URL)
    logger.info("DATABASE_URL (app): %s", masked)
    logger.info("Email provider: %s", settings.EMAIL_PROVIDER)


@app.on_event("startup")
def bootstrap_database() -> None:
    """
    Create tables, the initial admin user and the default permission matrix
    if they don't exist.
    """
    create_tables(engine)
    db = SessionLocal()
    try:
        bootstrap_admin(db)
        seed_permissions(db)
    except Exception as e:
        logger.error("Error during initial bootstrap: %s", e, exc_info=True)
        db.rollback()
    finally:
        db.close()
