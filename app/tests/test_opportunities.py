"""
Tests for opportunities and dashboard counters
"""
from fastapi import status

from app.models.audit_log import AuditLog
from app.models.document import Document
from app.models.email import Email
from app.models.report import Report
from app.models.task import Task


def headers_for(user):
    return {"x-user-id": str(user.id)}


def create_opportunity(client, user, **overrides):
    payload = {"title": "Acme renewal", "company_name": "Acme", "value": 1200.0}
    payload.update(overrides)
    return client.post("/api/v1/opportunities", json=payload, headers=headers_for(user))


def test_create_opportunity_defaults(client, admin_user):
    response = create_opportunity(client, admin_user)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["status"] == "open"
    assert data["stage"] == "prospecting"


def test_negative_value_is_400(client, admin_user):
    assert create_opportunity(client, admin_user, value=-5).status_code == status.HTTP_400_BAD_REQUEST


def test_archive_hides_from_default_list(client, db, admin_user):
    headers = headers_for(admin_user)
    keep_id = create_opportunity(client, admin_user, title="Keep").json()["id"]
    drop_id = create_opportunity(client, admin_user, title="Drop").json()["id"]

    archived = client.delete(f"/api/v1/opportunities/{drop_id}", headers=headers)
    assert archived.status_code == status.HTTP_200_OK
    assert archived.json()["status"] == "archived"

    listed = client.get("/api/v1/opportunities", headers=headers).json()
    assert [o["id"] for o in listed] == [keep_id]

    only_archived = client.get("/api/v1/opportunities?status=archived", headers=headers).json()
    assert [o["id"] for o in only_archived] == [drop_id]

    # Archived rows remain retrievable by id
    assert client.get(f"/api/v1/opportunities/{drop_id}", headers=headers).status_code == status.HTTP_200_OK

    db.expire_all()
    assert db.query(AuditLog).filter(AuditLog.action == "archive_opportunity").count() == 1


def test_filters(client, admin_user, gc_user):
    headers = headers_for(admin_user)
    create_opportunity(client, admin_user, title="Globex pilot", company_name="Globex", stage="proposal")
    create_opportunity(client, admin_user, title="Initech upsell", company_name="Initech", assigned_user_id=gc_user.id)

    by_stage = client.get("/api/v1/opportunities?stage=proposal", headers=headers).json()
    assert [o["title"] for o in by_stage] == ["Globex pilot"]

    by_owner = client.get(f"/api/v1/opportunities?assigned_user_id={gc_user.id}", headers=headers).json()
    assert [o["title"] for o in by_owner] == ["Initech upsell"]

    by_company = client.get("/api/v1/opportunities?search=globex", headers=headers).json()
    assert [o["title"] for o in by_company] == ["Globex pilot"]


def test_update_opportunity(client, admin_user):
    opp_id = create_opportunity(client, admin_user).json()["id"]

    updated = client.put(
        f"/api/v1/opportunities/{opp_id}",
        json={"status": "won", "stage": "closed", "actual_close_date": "2024-06-30"},
        headers=headers_for(admin_user),
    ).json()

    assert updated["status"] == "won"
    assert updated["actual_close_date"] == "2024-06-30"
    assert updated["title"] == "Acme renewal"


def test_viewer_reads_but_cannot_create(client, viewer_user, default_permissions):
    headers = headers_for(viewer_user)

    assert client.get("/api/v1/opportunities", headers=headers).status_code == status.HTTP_200_OK
    assert create_opportunity(client, viewer_user).status_code == status.HTTP_403_FORBIDDEN


def test_dashboard_stats(client, db, viewer_user, default_permissions):
    db.add_all([
        Task(title="Open", status="todo"),
        Task(title="Busy", status="in_progress"),
        Task(title="Done", status="completed"),
        Task(title="Dropped", status="cancelled"),
        Email(to="a@example.com", subject="s", body="b", status="sent"),
        Email(to="b@example.com", subject="s", body="b", status="failed"),
        Report(title="r1", type="system-usage", status="completed"),
        Report(title="r2", type="system-usage", status="pending"),
        Document(title="d", category="guides", content="c", author="Ana"),
    ])
    db.commit()

    stats = client.get("/api/v1/dashboard/stats", headers=headers_for(viewer_user)).json()

    assert stats == {"active_tasks": 2, "emails_sent": 1, "reports_generated": 1, "documentation_count": 1}


def test_dashboard_requires_authentication(client):
    response = client.get("/api/v1/dashboard/stats")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
