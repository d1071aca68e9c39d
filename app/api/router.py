"""
Main API router
"""
from fastapi import APIRouter

from app.api.v1 import (
    health,
    version,
    auth,
    dashboard,
    tasks,
    opportunities,
    emails,
    reports,
    docs,
    github,
)
from app.api.v1.admin import admin_router

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(opportunities.router, prefix="/opportunities", tags=["opportunities"])
api_router.include_router(emails.router, prefix="/emails", tags=["emails"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(docs.router, prefix="/docs", tags=["documentation"])
api_router.include_router(github.router, prefix="/github", tags=["github"])
api_router.include_router(admin_router)
