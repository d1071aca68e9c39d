"""
Tests for task endpoints
"""
from datetime import timedelta

from fastapi import status

from app.models.audit_log import AuditLog
from app.models.task import Task
from app.utils.datetime_utils import utcnow


def headers_for(user):
    return {"x-user-id": str(user.id)}


def test_gc_with_create_permission_creates_task(client, db, gc_user, grant):
    grant("gc", "tasks", create=True, read=True, update=True)

    response = client.post(
        "/api/v1/tasks",
        json={"title": "Ship report", "priority": "high"},
        headers=headers_for(gc_user),
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["status"] == "todo"
    assert data["priority"] == "high"
    assert data["created_by"] == gc_user.id

    db.expire_all()
    task = db.query(Task).filter(Task.title == "Ship report").one()
    assert task.status == "todo"
    assert db.query(AuditLog).filter(AuditLog.action == "create_task").count() == 1


def test_gc_without_create_permission_is_forbidden(client, db, gc_user, grant):
    grant("gc", "tasks", create=False, read=True)

    response = client.post(
        "/api/v1/tasks",
        json={"title": "Ship report", "priority": "high"},
        headers=headers_for(gc_user),
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "Permission denied for create on tasks"

    db.expire_all()
    assert db.query(Task).count() == 0
    assert db.query(AuditLog).count() == 0


def test_list_filters(client, admin_user):
    headers = headers_for(admin_user)
    client.post("/api/v1/tasks", json={"title": "Fix login bug", "priority": "urgent"}, headers=headers)
    client.post("/api/v1/tasks", json={"title": "Write newsletter", "priority": "low"}, headers=headers)
    client.post(
        "/api/v1/tasks",
        json={"title": "Plan offsite", "description": "Book venue", "status": "in_progress"},
        headers=headers,
    )

    all_tasks = client.get("/api/v1/tasks?status=all", headers=headers).json()
    assert len(all_tasks) == 3

    urgent = client.get("/api/v1/tasks?priority=urgent", headers=headers).json()
    assert [t["title"] for t in urgent] == ["Fix login bug"]

    in_progress = client.get("/api/v1/tasks?status=in_progress", headers=headers).json()
    assert [t["title"] for t in in_progress] == ["Plan offsite"]

    searched = client.get("/api/v1/tasks?search=VENUE", headers=headers).json()
    assert [t["title"] for t in searched] == ["Plan offsite"]


def test_completing_task_stamps_completed_at(client, admin_user):
    headers = headers_for(admin_user)
    task_id = client.post("/api/v1/tasks", json={"title": "Close sprint"}, headers=headers).json()["id"]

    done = client.put(f"/api/v1/tasks/{task_id}", json={"status": "completed"}, headers=headers).json()
    assert done["completed_at"] is not None

    reopened = client.put(f"/api/v1/tasks/{task_id}", json={"status": "todo"}, headers=headers).json()
    assert reopened["completed_at"] is None


def test_update_keeps_unset_fields(client, admin_user):
    headers = headers_for(admin_user)
    due = (utcnow() + timedelta(days=3)).replace(microsecond=0)
    created = client.post(
        "/api/v1/tasks",
        json={"title": "Review PR", "priority": "high", "due_date": due.isoformat()},
        headers=headers,
    ).json()

    updated = client.put(f"/api/v1/tasks/{created['id']}", json={"title": "Review PR #12"}, headers=headers).json()

    assert updated["title"] == "Review PR #12"
    assert updated["priority"] == "high"
    assert updated["due_date"].startswith(due.isoformat())


def test_get_and_delete(client, db, admin_user):
    headers = headers_for(admin_user)
    task_id = client.post("/api/v1/tasks", json={"title": "Temp"}, headers=headers).json()["id"]

    assert client.get(f"/api/v1/tasks/{task_id}", headers=headers).status_code == status.HTTP_200_OK
    assert client.delete(f"/api/v1/tasks/{task_id}", headers=headers).status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/tasks/{task_id}", headers=headers).status_code == status.HTTP_404_NOT_FOUND


def test_invalid_payload_is_400(client, admin_user):
    response = client.post("/api/v1/tasks", json={"title": ""}, headers=headers_for(admin_user))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["error"] is True
    assert body["path"] == "/api/v1/tasks"


def test_gc_cannot_delete_by_default(client, gc_user, admin_user, default_permissions):
    task_id = client.post("/api/v1/tasks", json={"title": "Keep"}, headers=headers_for(admin_user)).json()["id"]

    response = client.delete(f"/api/v1/tasks/{task_id}", headers=headers_for(gc_user))

    assert response.status_code == status.HTTP_403_FORBIDDEN
