"""
GitHub mirror endpoints

Sync endpoints are plain functions so the blocking GitHub calls run in the
threadpool.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.constants import RESOURCE_GITHUB
from app.core.deps import get_db, get_github_service, require_permission, audited
from app.core.errors import UpstreamError
from app.core.pipeline import AuditedRoute
from app.models.user import User
from app.schemas.github import GithubRepoOut, GithubCommitOut, GithubStatusOut, SyncResultOut
from app.services.github_service import (
    GithubSyncError,
    GithubSyncService,
    get_repo_or_404,
    list_commits,
    list_repos,
)

logger = logging.getLogger(__name__)

router = APIRouter(route_class=AuditedRoute)


@router.get("/repos", response_model=List[GithubRepoOut])
async def list_repos_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_GITHUB, "read")),
):
    return list_repos(db)


@router.get("/repos/{repo_id}", response_model=GithubRepoOut)
async def get_repo_endpoint(
    repo_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_GITHUB, "read")),
):
    return get_repo_or_404(db, repo_id)


@router.get("/repos/{repo_id}/commits", response_model=List[GithubCommitOut])
async def list_repo_commits_endpoint(
    repo_id: int,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_GITHUB, "read")),
):
    repo = get_repo_or_404(db, repo_id)
    return list_commits(db, repo_id=repo.id, limit=limit)


@router.get("/commits", response_model=List[GithubCommitOut])
async def list_commits_endpoint(
    repo_id: Optional[int] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_GITHUB, "read")),
):
    return list_commits(db, repo_id=repo_id, limit=limit)


@router.get("/status", response_model=GithubStatusOut)
async def github_status_endpoint(
    service: GithubSyncService = Depends(get_github_service),
    current_user: User = Depends(require_permission(RESOURCE_GITHUB, "read")),
):
    return service.status()


@router.post("/sync", response_model=SyncResultOut)
def sync_repositories_endpoint(
    service: GithubSyncService = Depends(get_github_service),
    current_user: User = Depends(require_permission(RESOURCE_GITHUB, "update")),
    _audit=Depends(audited("sync_repositories", RESOURCE_GITHUB)),
):
    """
    Mirror the token owner's repositories and their recent commits

    Skipped (skipped=true) when no token is configured. A GitHub failure
    returns 502; repositories synced before the failure are kept.
    """
    try:
        result = service.sync_repositories()
    except GithubSyncError as e:
        raise UpstreamError(f"GitHub sync failed: {e}")
    return result.to_dict()


@router.post("/repos/{repo_id}/sync", response_model=SyncResultOut)
def sync_repository_endpoint(
    repo_id: int,
    service: GithubSyncService = Depends(get_github_service),
    current_user: User = Depends(require_permission(RESOURCE_GITHUB, "update")),
    _audit=Depends(audited("sync_repository", RESOURCE_GITHUB)),
):
    try:
        result = service.sync_repository(repo_id)
    except GithubSyncError as e:
        raise UpstreamError(f"GitHub sync failed: {e}")
    return result.to_dict()
