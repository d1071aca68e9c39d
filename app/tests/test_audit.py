"""
Tests for audit recording
"""
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.api.v1 import tasks as tasks_api
from app.main import app as fastapi_app
from app.models.audit_log import AuditLog
from app.services.audit_service import AuditContext, log_audit, record_audit, should_record, split_values


def audit_rows(db):
    db.expire_all()
    return db.query(AuditLog).order_by(AuditLog.id.asc()).all()


def test_should_record():
    assert should_record(200, 1)
    assert should_record(201, 1)
    assert should_record(204, 1)
    assert not should_record(400, 1)
    assert not should_record(403, 1)
    assert not should_record(500, 1)
    assert not should_record(200, None)


def test_split_values_by_method():
    body = {"title": "x"}

    assert split_values("POST", body) == (None, body)
    assert split_values("PUT", body) == (body, body)
    assert split_values("patch", body) == (body, body)
    assert split_values("DELETE", body) == (None, None)


def test_create_is_audited(client, db, admin_user):
    response = client.post(
        "/api/v1/tasks",
        json={"title": "Write docs"},
        headers={"x-user-id": str(admin_user.id), "user-agent": "pytest-agent"},
    )
    assert response.status_code == status.HTTP_201_CREATED

    rows = audit_rows(db)
    assert len(rows) == 1
    row = rows[0]
    assert row.user_id == admin_user.id
    assert row.action == "create_task"
    assert row.resource == "tasks"
    assert row.resource_id is None
    assert row.old_values is None
    assert row.new_values == {"title": "Write docs"}
    assert row.user_agent == "pytest-agent"


def test_update_records_body_as_old_and_new(client, db, admin_user):
    headers = {"x-user-id": str(admin_user.id)}
    task_id = client.post("/api/v1/tasks", json={"title": "A"}, headers=headers).json()["id"]

    response = client.put(f"/api/v1/tasks/{task_id}", json={"status": "in_progress"}, headers=headers)
    assert response.status_code == status.HTTP_200_OK

    row = audit_rows(db)[-1]
    assert row.action == "update_task"
    assert row.resource_id == str(task_id)
    assert row.old_values == {"status": "in_progress"}
    assert row.new_values == {"status": "in_progress"}


def test_delete_records_no_values(client, db, admin_user):
    headers = {"x-user-id": str(admin_user.id)}
    task_id = client.post("/api/v1/tasks", json={"title": "A"}, headers=headers).json()["id"]

    response = client.delete(f"/api/v1/tasks/{task_id}", headers=headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    row = audit_rows(db)[-1]
    assert row.action == "delete_task"
    assert row.resource_id == str(task_id)
    assert row.old_values is None
    assert row.new_values is None


def test_failed_request_not_audited(client, db, admin_user):
    response = client.put(
        "/api/v1/tasks/4242",
        json={"status": "completed"},
        headers={"x-user-id": str(admin_user.id)},
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert audit_rows(db) == []


def test_invalid_body_not_audited(client, db, admin_user):
    response = client.post(
        "/api/v1/tasks",
        json={"title": "A", "priority": "whenever"},
        headers={"x-user-id": str(admin_user.id)},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert audit_rows(db) == []


def test_server_error_not_audited(client, db, admin_user, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("database exploded")

    monkeypatch.setattr(tasks_api, "create_task", explode)
    crashing_client = TestClient(fastapi_app, raise_server_exceptions=False)

    response = crashing_client.post(
        "/api/v1/tasks",
        json={"title": "A"},
        headers={"x-user-id": str(admin_user.id)},
    )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["detail"] == "Internal server error"
    assert audit_rows(db) == []


def test_reads_not_audited(client, db, admin_user):
    response = client.get("/api/v1/tasks", headers={"x-user-id": str(admin_user.id)})

    assert response.status_code == status.HTTP_200_OK
    assert audit_rows(db) == []


def test_record_audit_swallows_errors(db):
    """A failing audit write is logged, not raised"""
    factory = sessionmaker(autocommit=False, autoflush=False, bind=db.get_bind())
    context = AuditContext(action="create_task", resource="tasks", method="POST", body={"a": 1}, user_id=9999)

    # user 9999 does not exist, the foreign key rejects the row
    assert record_audit(factory, context) is None
    assert audit_rows(db) == []


def test_audit_log_listing_newest_first(client, db, admin_user):
    for i in range(3):
        log_audit(db, admin_user.id, f"action_{i}", "tasks", resource_id=str(i))

    response = client.get("/api/v1/admin/audit-logs", headers={"x-user-id": str(admin_user.id)})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total"] == 3
    assert data["page"] == 1
    assert [item["action"] for item in data["items"]] == ["action_2", "action_1", "action_0"]
    assert data["items"][0]["created_at"].endswith("Z")


def test_audit_log_listing_paged(client, db, admin_user, monkeypatch):
    from app.core.config import settings
    monkeypatch.setattr(settings, "AUDIT_LOG_PAGE_SIZE", 2)
    for i in range(3):
        log_audit(db, admin_user.id, f"action_{i}", "tasks")

    headers = {"x-user-id": str(admin_user.id)}
    first = client.get("/api/v1/admin/audit-logs", headers=headers).json()
    second = client.get("/api/v1/admin/audit-logs?page=2", headers=headers).json()

    assert len(first["items"]) == 2
    assert [item["action"] for item in second["items"]] == ["action_0"]
    assert second["page_size"] == 2
