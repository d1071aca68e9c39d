"""
Constants for roles, access-controlled resources and entity states
"""

SERVICE_NAME = "wishdesk-crm-backend"

# Role constants
ROLE_ADMIN = "admin"
ROLE_MOD = "mod"
ROLE_GC = "gc"
ROLE_VIEW_ONLY = "view_only"

ROLES = (ROLE_ADMIN, ROLE_MOD, ROLE_GC, ROLE_VIEW_ONLY)

# Higher level = more authority; unknown roles resolve to 0
ROLE_HIERARCHY = {
    ROLE_ADMIN: 4,
    ROLE_MOD: 3,
    ROLE_GC: 2,
    ROLE_VIEW_ONLY: 1,
}

# Permission actions
ACTION_CREATE = "create"
ACTION_READ = "read"
ACTION_UPDATE = "update"
ACTION_DELETE = "delete"

ACTIONS = (ACTION_CREATE, ACTION_READ, ACTION_UPDATE, ACTION_DELETE)

# Access-controlled resources
RESOURCE_TASKS = "tasks"
RESOURCE_EMAILS = "emails"
RESOURCE_REPORTS = "reports"
RESOURCE_DOCS = "docs"
RESOURCE_GITHUB = "github"
RESOURCE_OPPORTUNITIES = "opportunities"
RESOURCE_DASHBOARD = "dashboard"

RESOURCES = (
    RESOURCE_TASKS,
    RESOURCE_EMAILS,
    RESOURCE_REPORTS,
    RESOURCE_DOCS,
    RESOURCE_GITHUB,
    RESOURCE_OPPORTUNITIES,
    RESOURCE_DASHBOARD,
)

# Task states
TASK_STATUSES = ("todo", "in_progress", "completed", "cancelled")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")

# Report states
REPORT_PENDING = "pending"
REPORT_PROCESSING = "processing"
REPORT_COMPLETED = "completed"
REPORT_FAILED = "failed"

# Email states
EMAIL_PENDING = "pending"
EMAIL_SENT = "sent"
EMAIL_FAILED = "failed"

# Opportunity states
OPPORTUNITY_STATUSES = ("open", "won", "lost", "archived")
OPPORTUNITY_STAGES = ("prospecting", "qualification", "proposal", "negotiation", "closed")

# Document states
DOC_DRAFT = "draft"
DOC_PUBLISHED = "published"
