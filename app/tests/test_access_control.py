"""
Tests for the role hierarchy and the permission matrix
"""
import pytest
from fastapi import status

from app.constants import ACTIONS, RESOURCES, ROLES
from app.services.access_service import check_permission, check_role, role_level


@pytest.mark.parametrize("user_role", ROLES)
@pytest.mark.parametrize("required_role", ROLES)
def test_role_check_follows_hierarchy(user_role, required_role):
    decision = check_role(user_role, required_role)
    assert decision.allowed == (role_level(user_role) >= role_level(required_role))


def test_role_levels():
    assert role_level("admin") > role_level("mod") > role_level("gc") > role_level("view_only") > 0
    assert role_level("intern") == 0
    assert role_level(None) == 0


def test_unknown_role_denied_everything_but_unknown():
    assert not check_role("intern", "view_only").allowed
    assert check_role("intern", "intern").allowed


@pytest.mark.parametrize("resource", RESOURCES)
@pytest.mark.parametrize("action", ACTIONS)
def test_admin_bypasses_permission_table(db, resource, action):
    """Admin is allowed even with no rows at all"""
    assert check_permission(db, "admin", resource, action).allowed


def test_missing_row_denies(db):
    decision = check_permission(db, "gc", "tasks", "read")

    assert not decision.allowed
    assert decision.reason == "Access denied"


def test_action_flag_must_be_true(db, grant):
    grant("gc", "tasks", read=True, create=False)

    assert check_permission(db, "gc", "tasks", "read").allowed
    denied = check_permission(db, "gc", "tasks", "create")
    assert not denied.allowed
    assert denied.reason == "Permission denied for create on tasks"


def test_truthy_non_boolean_flag_denies(db, grant):
    row = grant("mod", "reports", read=True)
    row.actions = {"read": "yes", "create": 1}
    db.commit()

    assert not check_permission(db, "mod", "reports", "read").allowed
    assert not check_permission(db, "mod", "reports", "create").allowed


def test_permissions_are_per_resource(db, grant):
    grant("gc", "tasks", read=True)

    assert check_permission(db, "gc", "tasks", "read").allowed
    assert not check_permission(db, "gc", "emails", "read").allowed


def test_default_matrix(db, default_permissions):
    assert check_permission(db, "mod", "github", "update").allowed
    assert not check_permission(db, "mod", "github", "delete").allowed
    assert check_permission(db, "mod", "tasks", "delete").allowed

    assert check_permission(db, "gc", "tasks", "create").allowed
    assert check_permission(db, "gc", "docs", "update").allowed
    assert not check_permission(db, "gc", "tasks", "delete").allowed
    assert not check_permission(db, "gc", "reports", "create").allowed
    assert check_permission(db, "gc", "reports", "read").allowed

    for resource in RESOURCES:
        assert check_permission(db, "view_only", resource, "read").allowed
        assert not check_permission(db, "view_only", resource, "create").allowed


def test_route_denied_without_permission_row(client, gc_user):
    response = client.get("/api/v1/tasks", headers={"x-user-id": str(gc_user.id)})

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "Access denied"


def test_route_allowed_with_read_permission(client, gc_user, grant):
    grant("gc", "tasks", read=True)

    response = client.get("/api/v1/tasks", headers={"x-user-id": str(gc_user.id)})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


def test_admin_routes_require_admin_role(client, mod_user, admin_user):
    response = client.get("/api/v1/admin/users", headers={"x-user-id": str(mod_user.id)})
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "Insufficient permissions"

    response = client.get("/api/v1/admin/users", headers={"x-user-id": str(admin_user.id)})
    assert response.status_code == status.HTTP_200_OK


def test_unauthenticated_before_permission_check(client, db):
    response = client.post("/api/v1/tasks", json={"title": "x"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
