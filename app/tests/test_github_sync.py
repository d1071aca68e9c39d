"""
Tests for the GitHub synchronizer
"""
import httpx
import pytest
from fastapi import status

from app.core.config import settings
from app.core.deps import get_github_client
from app.main import app
from app.models.github import GithubCommit, GithubRepo
from app.services.github_service import GithubSyncError, GithubSyncService, parse_github_datetime

API_URL = "https://api.github.test"


def repo_payload(repo_id, name, stars=0, language="Python"):
    return {
        "id": repo_id,
        "name": name,
        "full_name": f"octo/{name}",
        "description": f"{name} repo",
        "language": language,
        "stargazers_count": stars,
        "forks_count": 1,
        "private": False,
        "owner": {"login": "octo"},
    }


def commit_payload(sha, message="Initial commit"):
    return {
        "sha": sha,
        "commit": {
            "message": message,
            "author": {"name": "Octo Cat", "date": "2024-05-01T12:00:00Z"},
        },
    }


class FakeGithub:
    """MockTransport handler serving a fixed set of repos and commits"""

    def __init__(self, repos, commits=None, fail_repos=False, fail_commits_for=()):
        self.repos = repos
        self.commits = commits or {}
        self.fail_repos = fail_repos
        self.fail_commits_for = set(fail_commits_for)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/user/repos":
            if self.fail_repos:
                return httpx.Response(500, json={"message": "Server Error"})
            return httpx.Response(200, json=self.repos)
        if path.startswith("/repos/") and path.endswith("/commits"):
            full_name = path[len("/repos/"):-len("/commits")]
            if full_name in self.fail_commits_for:
                return httpx.Response(409, json={"message": "Git Repository is empty."})
            return httpx.Response(200, json=self.commits.get(full_name, []))
        return httpx.Response(404, json={"message": "Not Found"})

    def client(self):
        return httpx.Client(base_url=API_URL, transport=httpx.MockTransport(self))


@pytest.fixture
def fake_github():
    return FakeGithub(
        repos=[repo_payload(1, "alpha", stars=5), repo_payload(2, "beta", stars=9, language=None)],
        commits={
            "octo/alpha": [commit_payload("a1"), commit_payload("a2", "Add feature")],
            "octo/beta": [commit_payload("b1")],
        },
    )


@pytest.fixture
def github_token(monkeypatch):
    monkeypatch.setattr(settings, "GITHUB_TOKEN", "test-token")


@pytest.fixture
def github_api(client, fake_github, github_token):
    """Route the app's GitHub client to the fake"""
    app.dependency_overrides[get_github_client] = fake_github.client
    return fake_github


def test_parse_github_datetime():
    parsed = parse_github_datetime("2024-05-01T12:00:00Z")
    assert parsed.tzinfo is None
    assert (parsed.year, parsed.hour) == (2024, 12)


def test_sync_creates_repos_and_commits(db, fake_github):
    result = GithubSyncService(db, fake_github.client(), token="t").sync_repositories()

    assert (result.created, result.updated, result.commits_added) == (2, 0, 3)
    assert not result.skipped
    assert db.query(GithubRepo).count() == 2
    assert db.query(GithubCommit).count() == 3

    list_request = fake_github.requests[0]
    assert list_request.url.params["sort"] == "updated"
    assert list_request.url.params["per_page"] == "100"

    beta = db.query(GithubRepo).filter(GithubRepo.full_name == "octo/beta").one()
    assert beta.language is None
    assert beta.last_sync_at is not None


def test_sync_twice_has_no_duplicates(db, fake_github):
    service = GithubSyncService(db, fake_github.client(), token="t")
    service.sync_repositories()

    fake_github.repos[0]["stargazers_count"] = 42
    second = service.sync_repositories()

    assert (second.created, second.updated, second.commits_added) == (0, 2, 0)
    assert db.query(GithubRepo).count() == 2
    assert db.query(GithubCommit).count() == 3
    alpha = db.query(GithubRepo).filter(GithubRepo.full_name == "octo/alpha").one()
    assert alpha.stars == 42


def test_no_token_skips_sync(db, fake_github):
    result = GithubSyncService(db, fake_github.client(), token=None).sync_repositories()

    assert result.skipped
    assert fake_github.requests == []
    assert db.query(GithubRepo).count() == 0


def test_repo_list_failure_raises(db):
    fake = FakeGithub(repos=[], fail_repos=True)

    with pytest.raises(GithubSyncError):
        GithubSyncService(db, fake.client(), token="t").sync_repositories()


def test_commit_failure_is_skipped(db):
    fake = FakeGithub(
        repos=[repo_payload(1, "empty"), repo_payload(2, "full")],
        commits={"octo/full": [commit_payload("f1")]},
        fail_commits_for=["octo/empty"],
    )

    result = GithubSyncService(db, fake.client(), token="t").sync_repositories()

    assert result.created == 2
    assert result.commits_added == 1


def test_sync_endpoint(client, db, admin_user, github_api):
    response = client.post("/api/v1/github/sync", headers={"x-user-id": str(admin_user.id)})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"skipped": False, "created": 2, "updated": 0, "commits_added": 3}

    repos = client.get("/api/v1/github/repos", headers={"x-user-id": str(admin_user.id)}).json()
    assert {r["full_name"] for r in repos} == {"octo/alpha", "octo/beta"}


def test_sync_endpoint_maps_failure_to_502(client, db, admin_user, github_token):
    fake = FakeGithub(repos=[], fail_repos=True)
    app.dependency_overrides[get_github_client] = fake.client

    response = client.post("/api/v1/github/sync", headers={"x-user-id": str(admin_user.id)})

    assert response.status_code == status.HTTP_502_BAD_GATEWAY
    assert "GitHub sync failed" in response.json()["detail"]


def test_sync_endpoint_without_token(client, admin_user, fake_github, monkeypatch):
    monkeypatch.setattr(settings, "GITHUB_TOKEN", None)
    app.dependency_overrides[get_github_client] = fake_github.client

    response = client.post("/api/v1/github/sync", headers={"x-user-id": str(admin_user.id)})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["skipped"] is True


def test_single_repo_sync_and_commits(client, db, admin_user, github_api):
    headers = {"x-user-id": str(admin_user.id)}
    client.post("/api/v1/github/sync", headers=headers)
    alpha = db.query(GithubRepo).filter(GithubRepo.full_name == "octo/alpha").one()

    github_api.commits["octo/alpha"].append(commit_payload("a3", "Fix bug"))
    response = client.post(f"/api/v1/github/repos/{alpha.id}/sync", headers=headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["commits_added"] == 1

    commits = client.get(f"/api/v1/github/repos/{alpha.id}/commits", headers=headers).json()
    assert {c["sha"] for c in commits} == {"a1", "a2", "a3"}


def test_single_repo_sync_unknown_repo(client, admin_user, github_api):
    response = client.post("/api/v1/github/repos/999/sync", headers={"x-user-id": str(admin_user.id)})

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_status_endpoint(client, admin_user, github_api):
    headers = {"x-user-id": str(admin_user.id)}
    before = client.get("/api/v1/github/status", headers=headers).json()
    assert before == {"configured": True, "repo_count": 0, "last_sync_at": None}

    client.post("/api/v1/github/sync", headers=headers)
    after = client.get("/api/v1/github/status", headers=headers).json()
    assert after["repo_count"] == 2
    assert after["last_sync_at"] is not None


def test_mod_cannot_delete_github_by_default(db, default_permissions):
    from app.services.access_service import check_permission

    assert check_permission(db, "mod", "github", "update").allowed
    assert not check_permission(db, "mod", "github", "delete").allowed
