"""Admin API (admin role only)."""
from fastapi import APIRouter
from app.api.v1.admin import users as admin_users
from app.api.v1.admin import role_permissions as admin_role_permissions
from app.api.v1.admin import audit_logs as admin_audit_logs
from app.api.v1.admin import task_categories as admin_task_categories

admin_router = APIRouter(prefix="/admin", tags=["admin"])
admin_router.include_router(admin_users.router, prefix="/users", tags=["admin-users"])
admin_router.include_router(admin_role_permissions.router, prefix="/role-permissions", tags=["admin-role-permissions"])
admin_router.include_router(admin_audit_logs.router, prefix="/audit-logs", tags=["admin-audit-logs"])
admin_router.include_router(admin_task_categories.router, prefix="/task-categories", tags=["admin-task-categories"])
