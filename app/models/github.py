"""
GitHub repository mirror models
"""
from sqlalchemy import Column, Integer, BigInteger, String, Boolean, DateTime, Text
from app.db.base import Base
from app.utils.datetime_utils import utcnow


class GithubRepo(Base):
    __tablename__ = "github_repos"

    id = Column(Integer, primary_key=True, index=True)
    repo_id = Column(BigInteger, nullable=True)  # GitHub's numeric id
    name = Column(String, nullable=False)
    full_name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    language = Column(String, nullable=True)
    stars = Column(Integer, nullable=False, default=0)
    forks = Column(Integer, nullable=False, default=0)
    is_private = Column(Boolean, nullable=False, default=False)
    last_sync_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class GithubCommit(Base):
    __tablename__ = "github_commits"

    id = Column(Integer, primary_key=True, index=True)
    repo_id = Column(Integer, nullable=False, index=True)  # local github_repos.id
    sha = Column(String, unique=True, nullable=False)
    message = Column(Text, nullable=False)
    author = Column(String, nullable=False)
    date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
