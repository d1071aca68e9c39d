"""
Database models
"""
from app.models.user import User, Role
from app.models.role_permission import RolePermission
from app.models.audit_log import AuditLog
from app.models.task import Task, TaskCategory
from app.models.opportunity import Opportunity
from app.models.email import Email
from app.models.report import Report
from app.models.document import Document
from app.models.github import GithubRepo, GithubCommit

__all__ = [
    "User",
    "Role",
    "RolePermission",
    "AuditLog",
    "Task",
    "TaskCategory",
    "Opportunity",
    "Email",
    "Report",
    "Document",
    "GithubRepo",
    "GithubCommit",
]
