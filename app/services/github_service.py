"""
GitHub synchronizer - mirrors the authenticated user's repositories and their
recent commits into local tables.

Rows are committed one at a time. If the GitHub API fails halfway through a
sync, rows already written stay written.
"""
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.constants import SERVICE_NAME
from app.core.config import Settings
from app.core.errors import NotFound
from app.models.github import GithubCommit, GithubRepo
from app.utils.datetime_utils import to_naive_utc, utcnow

logger = logging.getLogger(__name__)

REPO_PAGE_SIZE = 100
COMMIT_PAGE_SIZE = 50


class GithubSyncError(Exception):
    """The GitHub API call failed or returned an unusable response"""


@dataclass
class SyncResult:
    skipped: bool = False
    created: int = 0
    updated: int = 0
    commits_added: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_github_client(config: Settings, transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": SERVICE_NAME,
    }
    if config.GITHUB_TOKEN:
        headers["Authorization"] = f"Bearer {config.GITHUB_TOKEN}"
    return httpx.Client(
        base_url=config.GITHUB_API_URL,
        headers=headers,
        timeout=config.GITHUB_TIMEOUT_SECONDS,
        transport=transport,
    )


def parse_github_datetime(value: Optional[str]) -> datetime:
    """GitHub timestamps look like 2024-05-01T12:00:00Z; missing values mean now"""
    if not value:
        return utcnow()
    return to_naive_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def repo_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Map a GitHub repository payload onto GithubRepo columns"""
    return {
        "repo_id": payload.get("id"),
        "name": payload["name"],
        "full_name": payload["full_name"],
        "description": payload.get("description"),
        "language": payload.get("language"),
        "stars": payload.get("stargazers_count") or 0,
        "forks": payload.get("forks_count") or 0,
        "is_private": bool(payload.get("private", False)),
    }


def list_repos(db: Session) -> List[GithubRepo]:
    return db.query(GithubRepo).order_by(GithubRepo.updated_at.desc(), GithubRepo.id.desc()).all()


def get_repo_or_404(db: Session, repo_id: int) -> GithubRepo:
    repo = db.query(GithubRepo).filter(GithubRepo.id == repo_id).first()
    if not repo:
        raise NotFound(f"Repository with id {repo_id} not found")
    return repo


def list_commits(db: Session, repo_id: Optional[int] = None, limit: int = 100) -> List[GithubCommit]:
    query = db.query(GithubCommit)
    if repo_id is not None:
        query = query.filter(GithubCommit.repo_id == repo_id)
    return query.order_by(GithubCommit.date.desc(), GithubCommit.id.desc()).limit(limit).all()


class GithubSyncService:
    """Repository and commit sync against the GitHub REST API"""

    def __init__(self, db: Session, client: httpx.Client, token: Optional[str]):
        self.db = db
        self.client = client
        self.token = token

    @property
    def configured(self) -> bool:
        return bool(self.token)

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = self.client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.error(f"GitHub request {path} failed: {e}")
            raise GithubSyncError(f"GitHub request {path} failed: {e}") from e
        except ValueError as e:
            raise GithubSyncError(f"GitHub returned invalid JSON for {path}") from e

    def sync_repositories(self) -> SyncResult:
        """
        Upsert up to 100 recently updated repositories, then their commits

        Existing rows are matched by full_name and overwritten unconditionally.

        Raises:
            GithubSyncError: Listing repositories failed
        """
        if not self.configured:
            logger.warning("No GitHub token configured, skipping repository sync")
            return SyncResult(skipped=True)

        payloads = self._get("/user/repos", {"sort": "updated", "per_page": REPO_PAGE_SIZE})
        if not isinstance(payloads, list):
            raise GithubSyncError("Unexpected repository list payload from GitHub")

        result = SyncResult()
        for payload in payloads:
            fields = repo_fields(payload)
            local_repos = self.db.query(GithubRepo).all()
            repo = next((r for r in local_repos if r.full_name == fields["full_name"]), None)

            if repo is None:
                repo = GithubRepo(**fields)
                self.db.add(repo)
                result.created += 1
            else:
                for field, value in fields.items():
                    setattr(repo, field, value)
                result.updated += 1
            repo.last_sync_at = utcnow()
            self.db.commit()
            self.db.refresh(repo)

            try:
                result.commits_added += self.sync_repository_commits(repo)
            except GithubSyncError:
                logger.error("Commit sync failed for %s, continuing", repo.full_name)

        logger.info(
            "GitHub sync finished: %s created, %s updated, %s commits added",
            result.created, result.updated, result.commits_added,
        )
        return result

    def sync_repository_commits(self, repo: GithubRepo) -> int:
        """
        Insert the latest commits of one repository, skipping known shas

        Raises:
            GithubSyncError: Listing commits failed
        """
        payloads = self._get(f"/repos/{repo.full_name}/commits", {"per_page": COMMIT_PAGE_SIZE})
        if not isinstance(payloads, list):
            raise GithubSyncError(f"Unexpected commit list payload for {repo.full_name}")

        added = 0
        for payload in payloads:
            sha = payload.get("sha")
            if not sha:
                continue
            if self.db.query(GithubCommit).filter(GithubCommit.sha == sha).first():
                continue

            commit_info = payload.get("commit") or {}
            author = commit_info.get("author") or {}
            self.db.add(GithubCommit(
                repo_id=repo.id,
                sha=sha,
                message=commit_info.get("message") or "",
                author=author.get("name") or "Unknown",
                date=parse_github_datetime(author.get("date")),
            ))
            self.db.commit()
            added += 1
        return added

    def sync_repository(self, repo_id: int) -> SyncResult:
        """
        Sync commits of a single mirrored repository

        Raises:
            NotFound: No local repository with this id
            GithubSyncError: Listing commits failed
        """
        repo = get_repo_or_404(self.db, repo_id)
        if not self.configured:
            logger.warning("No GitHub token configured, skipping sync of %s", repo.full_name)
            return SyncResult(skipped=True)

        added = self.sync_repository_commits(repo)
        repo.last_sync_at = utcnow()
        self.db.commit()
        return SyncResult(commits_added=added)

    def status(self) -> Dict[str, Any]:
        repo_count = self.db.query(GithubRepo).count()
        last_sync_at = self.db.query(func.max(GithubRepo.last_sync_at)).scalar()
        return {
            "configured": self.configured,
            "repo_count": repo_count,
            "last_sync_at": last_sync_at,
        }
