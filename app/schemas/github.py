"""
GitHub mirror schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class GithubRepoOut(BaseModel):
    id: int
    repo_id: Optional[int] = None
    name: str
    full_name: str
    description: Optional[str] = None
    language: Optional[str] = None
    stars: int
    forks: int
    is_private: bool
    last_sync_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class GithubCommitOut(BaseModel):
    id: int
    repo_id: int
    sha: str
    message: str
    author: str
    date: datetime

    model_config = ConfigDict(from_attributes=True)


class SyncResultOut(BaseModel):
    skipped: bool = False
    created: int = 0
    updated: int = 0
    commits_added: int = 0


class GithubStatusOut(BaseModel):
    configured: bool
    repo_count: int
    last_sync_at: Optional[datetime] = None
