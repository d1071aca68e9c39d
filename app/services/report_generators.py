"""
Report generators

Each generator pulls full collections from the database, computes simple
aggregates and renders them into a Markdown document. Errors propagate to the
caller (report_service), which marks the report failed.
"""
from collections import Counter
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from app.models.document import Document
from app.models.email import Email
from app.models.github import GithubCommit, GithubRepo
from app.models.report import Report
from app.models.task import Task
from app.models.user import User
from app.utils.datetime_utils import iso_utc, utcnow

DEFAULT_TOP_N = 5
DEFAULT_WINDOW_DAYS = 30

GenerateFn = Callable[[Session, Dict[str, Any]], str]


@dataclass(frozen=True)
class ReportGenerator:
    type: str
    name: str
    description: str
    generate: GenerateFn


class ReportRegistry:
    """Report generators keyed by type id"""

    def __init__(self):
        self._generators: Dict[str, ReportGenerator] = {}

    def register(self, generator: ReportGenerator) -> None:
        if generator.type in self._generators:
            raise ValueError(f"Report type '{generator.type}' already registered")
        self._generators[generator.type] = generator

    def get(self, report_type: str) -> Optional[ReportGenerator]:
        return self._generators.get(report_type)

    def types(self) -> List[ReportGenerator]:
        return list(self._generators.values())

    def __contains__(self, report_type: str) -> bool:
        return report_type in self._generators


# Aggregation helpers

def count_by(items: Iterable[Any], key: Callable[[Any], Any]) -> Dict[str, int]:
    """Counts per key, most common first"""
    counter = Counter(str(key(item)) for item in items)
    return dict(counter.most_common())


def rate(numerator: int, denominator: int) -> float:
    """Percentage rounded to one decimal, 0 when there is nothing to divide by"""
    if denominator <= 0:
        return 0.0
    return round(numerator / denominator * 100, 1)


def top_n(items: Iterable[Any], key: Callable[[Any], Any], n: int) -> List[Any]:
    return sorted(items, key=key, reverse=True)[:n]


def int_param(parameters: Dict[str, Any], name: str, default: int) -> int:
    value = int(parameters.get(name, default))
    if value < 1:
        raise ValueError(f"Parameter '{name}' must be a positive integer")
    return value


def bullet_lines(counts: Dict[str, Any], empty: str = "- None") -> str:
    if not counts:
        return empty + "\n"
    return "".join(f"- {label}: {value}\n" for label, value in counts.items())


def header(title: str) -> str:
    return f"# {title}\n\nGenerated: {iso_utc(utcnow())}\n\n"


# Generators

def generate_task_performance(db: Session, parameters: Dict[str, Any]) -> str:
    n = int_param(parameters, "top_n", DEFAULT_TOP_N)
    now = utcnow()
    tasks = db.query(Task).all()
    completed = [t for t in tasks if t.status == "completed"]
    active = [t for t in tasks if t.status != "completed"]

    durations = [
        (t.completed_at - t.created_at).total_seconds() / 86400
        for t in completed
        if t.completed_at and t.created_at
    ]
    avg_days = round(sum(durations) / len(durations), 1) if durations else 0

    overdue = [t for t in active if t.status != "cancelled" and t.due_date and t.due_date < now]
    most_overdue = top_n(overdue, key=lambda t: now - t.due_date, n=n)

    content = header("Task Performance Report")
    content += "## Summary\n\n"
    content += f"- Total tasks: {len(tasks)}\n"
    content += f"- Completed tasks: {len(completed)}\n"
    content += f"- Active tasks: {len(active)}\n"
    content += f"- Completion rate: {rate(len(completed), len(tasks))}%\n"
    content += f"- Average completion time: {avg_days} days\n\n"
    content += "## Tasks by Status\n\n" + bullet_lines(count_by(tasks, lambda t: t.status)) + "\n"
    content += "## Tasks by Priority\n\n" + bullet_lines(count_by(tasks, lambda t: t.priority)) + "\n"
    content += "## Tasks by Category\n\n"
    content += bullet_lines(count_by(tasks, lambda t: t.category or "Uncategorized")) + "\n"
    content += f"## Most Overdue Tasks (top {n})\n\n"
    if most_overdue:
        for task in most_overdue:
            days = (now - task.due_date).days
            content += f"- {task.title} ({task.priority}, {days} days overdue)\n"
    else:
        content += "- No overdue tasks\n"
    return content


def generate_github_activity(db: Session, parameters: Dict[str, Any]) -> str:
    n = int_param(parameters, "top_n", DEFAULT_TOP_N)
    repos = db.query(GithubRepo).all()
    commits = db.query(GithubCommit).all()
    names = {repo.id: repo.name for repo in repos}

    content = header("GitHub Activity Report")
    content += "## Summary\n\n"
    content += f"- Total repositories: {len(repos)}\n"
    content += f"- Total commits: {len(commits)}\n\n"
    content += "## Repositories by Language\n\n"
    content += bullet_lines(count_by(repos, lambda r: r.language or "Unknown")) + "\n"
    content += f"## Top Repositories by Stars (top {n})\n\n"
    starred = top_n(repos, key=lambda r: r.stars or 0, n=n)
    if starred:
        for repo in starred:
            content += f"- {repo.full_name}: {repo.stars} stars, {repo.forks} forks\n"
    else:
        content += "- No repositories synced\n"
    content += "\n## Commits by Repository\n\n"
    content += bullet_lines(count_by(commits, lambda c: names.get(c.repo_id, "Unknown")))
    return content


def generate_email_campaign(db: Session, parameters: Dict[str, Any]) -> str:
    emails = db.query(Email).all()
    sent = [e for e in emails if e.status == "sent"]
    opened = [e for e in emails if e.opened_at]

    content = header("Email Campaign Report")
    content += "## Summary\n\n"
    content += f"- Total emails: {len(emails)}\n"
    content += f"- Sent emails: {len(sent)}\n"
    content += f"- Opened emails: {len(opened)}\n"
    content += f"- Open rate: {rate(len(opened), len(sent))}%\n\n"
    content += "## Emails by Template\n\n"
    content += bullet_lines(count_by(emails, lambda e: e.template or "No Template")) + "\n"
    content += "## Delivery Status\n\n"
    content += bullet_lines(count_by(emails, lambda e: e.status))
    return content


def _assignee_label(task: Task, usernames: Dict[int, str]) -> str:
    if task.assigned_to is None:
        return "Unassigned"
    return usernames.get(task.assigned_to, f"User #{task.assigned_to}")


def generate_team_productivity(db: Session, parameters: Dict[str, Any]) -> str:
    tasks = db.query(Task).all()
    usernames = {user.id: user.username for user in db.query(User).all()}

    per_assignee = count_by(tasks, lambda t: _assignee_label(t, usernames))
    completed = count_by(
        [t for t in tasks if t.status == "completed"],
        lambda t: _assignee_label(t, usernames),
    )
    workload = count_by(
        [t for t in tasks if t.status not in ("completed", "cancelled")],
        lambda t: _assignee_label(t, usernames),
    )
    completion_rates = {
        assignee: f"{rate(completed.get(assignee, 0), total)}%"
        for assignee, total in per_assignee.items()
    }

    content = header("Team Productivity Report")
    content += "## Tasks by Assignee\n\n" + bullet_lines(per_assignee) + "\n"
    content += "## Completion Rate by Assignee\n\n" + bullet_lines(completion_rates) + "\n"
    content += "## Open Workload\n\n" + bullet_lines(workload)
    return content


def generate_system_usage(db: Session, parameters: Dict[str, Any]) -> str:
    window_days = int_param(parameters, "window_days", DEFAULT_WINDOW_DAYS)
    since = utcnow() - timedelta(days=window_days)

    collections = {
        "Tasks": db.query(Task).all(),
        "Emails": db.query(Email).all(),
        "Reports": db.query(Report).all(),
        "Documentation": db.query(Document).all(),
    }
    usage = {label: len(rows) for label, rows in collections.items()}
    growth = {
        label: len([row for row in rows if row.created_at and row.created_at >= since])
        for label, rows in collections.items()
    }

    content = header("System Usage Report")
    content += "## Feature Usage\n\n" + bullet_lines(usage) + "\n"
    content += f"## Growth (last {window_days} days)\n\n" + bullet_lines(growth)
    return content


def build_report_registry() -> ReportRegistry:
    registry = ReportRegistry()
    registry.register(ReportGenerator(
        type="task-performance",
        name="Task Performance",
        description="Completion rates, average completion time and task breakdowns",
        generate=generate_task_performance,
    ))
    registry.register(ReportGenerator(
        type="github-activity",
        name="GitHub Activity",
        description="Repository and commit activity from the GitHub mirror",
        generate=generate_github_activity,
    ))
    registry.register(ReportGenerator(
        type="email-campaign",
        name="Email Campaign",
        description="Delivery and open rates for outbound email",
        generate=generate_email_campaign,
    ))
    registry.register(ReportGenerator(
        type="team-productivity",
        name="Team Productivity",
        description="Task load and completion rate per assignee",
        generate=generate_team_productivity,
    ))
    registry.register(ReportGenerator(
        type="system-usage",
        name="System Usage",
        description="Record counts per feature and recent growth",
        generate=generate_system_usage,
    ))
    return registry
