"""
Email template registry and {key} placeholder substitution
"""
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from app.core.errors import NotFound

CATEGORY_SYSTEM = "system"
CATEGORY_CUSTOM = "custom"


def substitute(text: str, variables: Dict[str, str]) -> str:
    """
    Replace {key} placeholders with values from variables

    Keys may contain any characters. Single pass over the text, so values are
    never expanded again; placeholders without a matching key are left exactly
    as written.
    """
    if not variables:
        return text

    pattern = re.compile("|".join(re.escape("{" + key + "}") for key in variables))
    return pattern.sub(lambda match: str(variables[match.group(0)[1:-1]]), text)


@dataclass(frozen=True)
class EmailTemplate:
    id: str
    name: str
    subject: str
    body: str
    category: str = CATEGORY_SYSTEM
    # Display grouping only
    assigned_user_id: Optional[int] = None

    def render(self, variables: Dict[str, str]) -> Tuple[str, str]:
        return substitute(self.subject, variables), substitute(self.body, variables)


class TemplateRegistry:
    """Fixed set of named templates, built once at startup"""

    def __init__(self, templates: Iterable[EmailTemplate]):
        self._templates: Dict[str, EmailTemplate] = {}
        for template in templates:
            if template.id in self._templates:
                raise ValueError(f"Duplicate email template id '{template.id}'")
            self._templates[template.id] = template

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._templates

    def get(self, template_id: str) -> Optional[EmailTemplate]:
        return self._templates.get(template_id)

    def get_or_404(self, template_id: str) -> EmailTemplate:
        template = self.get(template_id)
        if template is None:
            raise NotFound(f"Email template '{template_id}' not found")
        return template

    def all(self, category: Optional[str] = None) -> List[EmailTemplate]:
        templates = list(self._templates.values())
        if category:
            templates = [t for t in templates if t.category == category]
        return templates


TASK_ASSIGNMENT_BODY = """Hi {assigneeName},

You have been assigned a new task:

**{taskTitle}**
{taskDescription}

Priority: {taskPriority}
Due Date: {taskDueDate}

Please log into the Wish Desk CRM to view more details.

Best regards,
Wish Desk CRM Team"""

TASK_COMPLETION_BODY = """Hi Team,

Great news! The following task has been completed:

**{taskTitle}**
Completed by: {completedBy}
Completion Date: {completionDate}

Thanks for your hard work!

Best regards,
Wish Desk CRM Team"""

WEEKLY_REPORT_BODY = """Hi Team,

Here's your weekly performance summary:

**Tasks Completed:** {tasksCompleted}
**Active Tasks:** {activeTasks}
**GitHub Activity:** {githubCommits} commits
**Team Productivity:** {productivityScore}%

Full report is available in the CRM dashboard.

Best regards,
Wish Desk CRM Team"""

WELCOME_BODY = """Hi {firstName},

Welcome to {companyName}! We're glad to be working with you.

Your point of contact is {ownerName}, who will reach out shortly.

Best regards,
{ownerName}"""

FOLLOW_UP_BODY = """Hi {firstName},

Following up on our conversation about {topic}. Let me know if you have any
questions or if there's a good time to talk this week.

Best regards,
{ownerName}"""


def build_template_registry() -> TemplateRegistry:
    return TemplateRegistry([
        EmailTemplate(
            id="task-assignment",
            name="Task Assignment",
            subject="New Task Assigned: {taskTitle}",
            body=TASK_ASSIGNMENT_BODY,
        ),
        EmailTemplate(
            id="task-completion",
            name="Task Completion",
            subject="Task Completed: {taskTitle}",
            body=TASK_COMPLETION_BODY,
        ),
        EmailTemplate(
            id="weekly-report",
            name="Weekly Report",
            subject="Weekly Team Performance Report - {weekDate}",
            body=WEEKLY_REPORT_BODY,
        ),
        EmailTemplate(
            id="welcome",
            name="Client Welcome",
            subject="Welcome to {companyName}",
            body=WELCOME_BODY,
            category=CATEGORY_CUSTOM,
        ),
        EmailTemplate(
            id="follow-up",
            name="Follow Up",
            subject="Following up: {topic}",
            body=FOLLOW_UP_BODY,
            category=CATEGORY_CUSTOM,
        ),
    ])
