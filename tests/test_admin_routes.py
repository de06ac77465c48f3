# tests/test_admin_routes.py

"""
Tests for admin account management and the signup approval endpoints.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock

from models.actor import AdminActor


ADMIN_PAYLOAD = {
    "first_name": "Ana",
    "last_name": "Pono",
    "email": "ana@example.com",
    "mobile": "+1 (808) 555-0100",
    "national_id": "X1",
}


@pytest.fixture
def account_manager():
    """A custom admin allowed to manage admin accounts inside project B."""
    return AdminActor(
        id="manager-1",
        account_type="custom",
        assigned_projects={"B"},
        permissions={"admin_accounts": ["read", "create", "write"]},
    )


@pytest.fixture
def seeded(api_store):
    api_store.tables["admins"] = [
        {"id": "super-1", "account_type": "super_admin", "assigned_projects": [], "permissions": {}, "is_active": True},
        {"id": "full-1", "account_type": "full_access", "assigned_projects": ["A", "B"], "permissions": {}, "is_active": True},
    ]
    api_store.tables["pending_admins"] = [
        {
            "id": "req-1",
            "first_name": "Lana",
            "last_name": "Kea",
            "email": "lana@example.com",
            "mobile": "808-555-0101",
            "national_id": "ID-1",
            "auth_uid": "uid-1",
            "status": "pending",
        }
    ]
    api_store.auth.admin.create_user.return_value = Mock(user=Mock(id="new-uid"))
    return api_store


# ------------------------------------------------------------------
# List / read
# ------------------------------------------------------------------
def test_list_admins(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)

    response = client.get("/admins/")
    assert response.status_code == 200
    assert {a["id"] for a in response.json()} == {"super-1", "full-1"}


def test_full_access_can_read_admins(client: TestClient, as_actor, full_access_admin, seeded):
    as_actor(full_access_admin)
    assert client.get("/admins/full-1").status_code == 200


def test_custom_without_grant_cannot_read_admins(client: TestClient, as_actor, custom_admin, seeded):
    as_actor(custom_admin)

    response = client.get("/admins/")
    assert response.status_code == 403
    assert "admin_accounts:read" in response.json()["detail"]


def test_get_missing_admin(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)
    assert client.get("/admins/nope").status_code == 404


# ------------------------------------------------------------------
# Create
# ------------------------------------------------------------------
def test_super_admin_creates_custom_admin(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)

    response = client.post("/admins/", json={
        **ADMIN_PAYLOAD,
        "account_type": "custom",
        "assigned_projects": ["A"],
        "permissions": {"news": ["read", "write"]},
    })

    assert response.status_code == 201
    data = response.json()
    assert data["id"] == "new-uid"
    assert data["permissions"] == {"news": ["read", "write"]}
    assert data["approved_by"] == "super-1"
    seeded.auth.reset_password_for_email.assert_called_once_with("ana@example.com")


def test_create_with_invalid_grant_is_a_form_error(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)

    response = client.post("/admins/", json={
        **ADMIN_PAYLOAD,
        "account_type": "custom",
        "assigned_projects": ["A"],
        "permissions": {"news": ["fly"]},
    })

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "unknown_action"
    seeded.auth.admin.create_user.assert_not_called()


def test_full_access_cannot_create_admins(client: TestClient, as_actor, full_access_admin, seeded):
    as_actor(full_access_admin)

    response = client.post("/admins/", json={**ADMIN_PAYLOAD, "account_type": "full_access", "assigned_projects": ["A"]})
    assert response.status_code == 403


def test_manager_cannot_grant_super_admin(client: TestClient, as_actor, account_manager, seeded):
    as_actor(account_manager)

    response = client.post("/admins/", json={**ADMIN_PAYLOAD, "account_type": "super_admin"})
    assert response.status_code == 403


def test_manager_cannot_assign_foreign_projects(client: TestClient, as_actor, account_manager, seeded):
    as_actor(account_manager)

    response = client.post("/admins/", json={**ADMIN_PAYLOAD, "account_type": "full_access", "assigned_projects": ["A"]})
    assert response.status_code == 403
    assert "A" in response.json()["detail"]


def test_manager_assigns_own_project(client: TestClient, as_actor, account_manager, seeded):
    as_actor(account_manager)

    response = client.post("/admins/", json={
        **ADMIN_PAYLOAD,
        "account_type": "custom",
        "assigned_projects": ["B"],
        "permissions": {"admin_accounts": ["read"]},
    })
    assert response.status_code == 201


def test_manager_cannot_grant_what_it_lacks(client: TestClient, as_actor, account_manager, seeded):
    as_actor(account_manager)

    response = client.post("/admins/", json={
        **ADMIN_PAYLOAD,
        "account_type": "custom",
        "assigned_projects": ["B"],
        "permissions": {"news": ["read"], "admin_accounts": ["delete"]},
    })
    assert response.status_code == 403
    assert "admin_accounts:delete" in response.json()["detail"]
    assert "news:read" in response.json()["detail"]
    seeded.auth.admin.create_user.assert_not_called()


def test_manager_cannot_hand_out_full_access(client: TestClient, as_actor, account_manager, seeded):
    as_actor(account_manager)

    response = client.post("/admins/", json={**ADMIN_PAYLOAD, "account_type": "full_access", "assigned_projects": ["B"]})
    assert response.status_code == 403


def test_insert_failure_removes_auth_user(client: TestClient, as_actor, super_admin, seeded, monkeypatch):
    as_actor(super_admin)
    monkeypatch.setattr(type(seeded), "table", Mock(side_effect=Exception("duplicate key value")))

    response = client.post("/admins/", json={**ADMIN_PAYLOAD, "account_type": "super_admin"})

    assert response.status_code == 400
    seeded.auth.admin.delete_user.assert_called_once_with("new-uid")


def test_cleanup_failure_keeps_insert_error(client: TestClient, as_actor, super_admin, seeded, monkeypatch):
    as_actor(super_admin)
    monkeypatch.setattr(type(seeded), "table", Mock(side_effect=Exception("duplicate key value")))
    seeded.auth.admin.delete_user.side_effect = Exception("auth service unavailable")

    response = client.post("/admins/", json={**ADMIN_PAYLOAD, "account_type": "super_admin"})

    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]
    seeded.auth.admin.delete_user.assert_called_once_with("new-uid")


# ------------------------------------------------------------------
# Update
# ------------------------------------------------------------------
def test_update_revalidates_grant(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)

    response = client.patch("/admins/full-1", json={"account_type": "custom", "permissions": {"units": ["read"]}})

    assert response.status_code == 200
    assert response.json()["account_type"] == "custom"
    assert response.json()["permissions"] == {"units": ["read"]}


def test_update_to_custom_without_grant(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)

    response = client.patch("/admins/full-1", json={"account_type": "custom"})
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "empty_grant"


def test_cannot_demote_last_super_admin(client: TestClient, as_actor, seeded):
    as_actor(AdminActor(id="other-super", account_type="super_admin"))

    response = client.patch("/admins/super-1", json={"account_type": "full_access", "assigned_projects": ["A"]})
    assert response.status_code == 400


# ------------------------------------------------------------------
# Update by a non-super account manager
# ------------------------------------------------------------------
@pytest.fixture
def scoped(seeded):
    seeded.tables["admins"] += [
        {"id": "manager-1", "account_type": "custom", "assigned_projects": ["B"],
         "permissions": {"admin_accounts": ["read", "create", "write"]}, "is_active": True},
        {"id": "b-admin", "account_type": "custom", "assigned_projects": ["B"],
         "permissions": {"admin_accounts": ["read"]}, "is_active": True, "first_name": "Noe", "mobile": "808-555-0102"},
        {"id": "z-admin", "account_type": "custom", "assigned_projects": ["Z"],
         "permissions": {"admin_accounts": ["read"]}, "is_active": True},
    ]
    return seeded


def _row(store, admin_id):
    return next(a for a in store.tables["admins"] if a["id"] == admin_id)


def test_manager_cannot_widen_own_grant(client: TestClient, as_actor, account_manager, scoped):
    as_actor(account_manager)

    response = client.patch("/admins/manager-1", json={
        "permissions": {"users": ["read", "write", "delete"], "admin_accounts": ["read", "create", "write", "delete"]},
    })

    assert response.status_code == 403
    assert _row(scoped, "manager-1")["permissions"] == {"admin_accounts": ["read", "create", "write"]}


def test_manager_can_edit_own_profile(client: TestClient, as_actor, account_manager, scoped):
    as_actor(account_manager)

    response = client.patch("/admins/manager-1", json={"first_name": "Mana"})
    assert response.status_code == 200
    assert response.json()["first_name"] == "Mana"


def test_manager_cannot_edit_super_admin(client: TestClient, as_actor, account_manager, scoped):
    as_actor(account_manager)

    response = client.patch("/admins/super-1", json={"account_type": "custom", "assigned_projects": ["B"], "permissions": {"admin_accounts": ["read"]}})
    assert response.status_code == 403
    assert _row(scoped, "super-1")["account_type"] == "super_admin"

    assert client.patch("/admins/super-1", json={"first_name": "X"}).status_code == 403


def test_manager_cannot_edit_admin_in_foreign_project(client: TestClient, as_actor, account_manager, scoped):
    as_actor(account_manager)

    response = client.patch("/admins/z-admin", json={"first_name": "X"})
    assert response.status_code == 403
    assert "Z" in response.json()["detail"]


def test_manager_cannot_edit_admin_spanning_foreign_projects(client: TestClient, as_actor, account_manager, scoped):
    as_actor(account_manager)

    # full-1 is assigned A and B; the manager only has B
    assert client.patch("/admins/full-1", json={"first_name": "X"}).status_code == 403


def test_manager_grants_only_what_it_holds(client: TestClient, as_actor, account_manager, scoped):
    as_actor(account_manager)

    response = client.patch("/admins/b-admin", json={"permissions": {"news": ["read"]}})
    assert response.status_code == 403
    assert "news:read" in response.json()["detail"]

    response = client.patch("/admins/b-admin", json={"permissions": {"admin_accounts": ["read", "write"]}})
    assert response.status_code == 200
    assert response.json()["permissions"] == {"admin_accounts": ["read", "write"]}


def test_manager_cannot_move_admin_out_of_scope(client: TestClient, as_actor, account_manager, scoped):
    as_actor(account_manager)

    response = client.patch("/admins/b-admin", json={"assigned_projects": ["A"]})
    assert response.status_code == 403
    assert _row(scoped, "b-admin")["assigned_projects"] == ["B"]


def test_manager_cannot_promote_to_full_access(client: TestClient, as_actor, account_manager, scoped):
    as_actor(account_manager)

    response = client.patch("/admins/b-admin", json={"account_type": "full_access"})
    assert response.status_code == 403


def test_approval_by_manager_is_limited_to_its_grant(client: TestClient, as_actor, account_manager, seeded):
    as_actor(account_manager)

    response = client.post(
        "/admins/pending/req-1/approve",
        json={"account_type": "custom", "assigned_projects": ["B"], "permissions": {"guards": ["read"]}},
    )

    assert response.status_code == 403
    seeded.rpc.assert_not_called()


# ------------------------------------------------------------------
# Profile validation on update
# ------------------------------------------------------------------
@pytest.mark.parametrize(
    "body",
    [
        {"first_name": "   "},
        {"last_name": ""},
        {"national_id": " "},
        {"mobile": "not-a-phone!"},
        {"mobile": "  "},
    ],
)
def test_update_rejects_invalid_profile_fields(client: TestClient, as_actor, super_admin, scoped, body):
    as_actor(super_admin)

    response = client.patch("/admins/b-admin", json=body)

    assert response.status_code == 422
    row = _row(scoped, "b-admin")
    assert row["first_name"] == "Noe"
    assert row["mobile"] == "808-555-0102"


def test_update_strips_profile_fields(client: TestClient, as_actor, super_admin, scoped):
    as_actor(super_admin)

    response = client.patch("/admins/b-admin", json={"first_name": "  Noelani ", "mobile": " 808 555 0199 "})
    assert response.status_code == 200
    assert response.json()["first_name"] == "Noelani"
    assert response.json()["mobile"] == "808 555 0199"


# ------------------------------------------------------------------
# Activate / deactivate / delete
# ------------------------------------------------------------------
def test_toggle_active(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)

    response = client.post("/admins/full-1/toggle-active")
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    response = client.post("/admins/full-1/toggle-active")
    assert response.json()["is_active"] is True


def test_toggle_requires_super_admin(client: TestClient, as_actor, full_access_admin, seeded):
    as_actor(full_access_admin)
    assert client.post("/admins/super-1/toggle-active").status_code == 403


def test_cannot_toggle_self(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)
    assert client.post("/admins/super-1/toggle-active").status_code == 400


def test_delete_admin(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)

    response = client.delete("/admins/full-1")
    assert response.status_code == 200
    assert [a["id"] for a in seeded.tables["admins"]] == ["super-1"]


def test_cannot_delete_last_super_admin(client: TestClient, as_actor, seeded):
    as_actor(AdminActor(id="other-super", account_type="super_admin"))
    assert client.delete("/admins/super-1").status_code == 400


# ------------------------------------------------------------------
# Pending requests
# ------------------------------------------------------------------
def test_list_pending(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)

    response = client.get("/admins/pending/", params={"status": "pending"})
    assert response.status_code == 200
    assert [r["id"] for r in response.json()] == ["req-1"]


def test_approve_then_approve_again(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)
    body = {"account_type": "custom", "assigned_projects": ["A"], "permissions": {"news": ["read"]}}

    first = client.post("/admins/pending/req-1/approve", json=body)
    assert first.status_code == 200
    assert first.json()["status"] == "approved"
    assert first.json()["admin"]["id"] == "uid-1"

    second = client.post("/admins/pending/req-1/approve", json={**body, "account_type": "full_access"})
    assert second.status_code == 409

    approved = next(a for a in seeded.tables["admins"] if a["id"] == "uid-1")
    assert approved["account_type"] == "custom"


def test_approve_with_unknown_entity(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)

    response = client.post(
        "/admins/pending/req-1/approve",
        json={"account_type": "custom", "assigned_projects": ["A"], "permissions": {"buildings": ["read"]}},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["entities"] == ["buildings"]
    seeded.rpc.assert_not_called()


def test_approve_requires_create_permission(client: TestClient, as_actor, full_access_admin, seeded):
    as_actor(full_access_admin)

    response = client.post("/admins/pending/req-1/approve", json={"account_type": "full_access", "assigned_projects": ["A"]})
    assert response.status_code == 403


def test_approve_missing_request(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)

    response = client.post("/admins/pending/nope/approve", json={"account_type": "super_admin"})
    assert response.status_code == 404


def test_reject_then_approve(client: TestClient, as_actor, super_admin, seeded):
    as_actor(super_admin)

    response = client.post("/admins/pending/req-1/reject", json={"reason": "unknown applicant"})
    assert response.status_code == 200
    assert response.json()["request"]["rejection_reason"] == "unknown applicant"

    response = client.post("/admins/pending/req-1/approve", json={"account_type": "super_admin"})
    assert response.status_code == 409
