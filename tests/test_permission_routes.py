# tests/test_permission_routes.py

"""
Tests for the permission HTTP endpoints.
"""

from fastapi.testclient import TestClient

from app.config.page_catalog import flatten_keys
from tests.conftest import ADMIN, BUYER, CLERK


def menu_keys(items):
    keys = []
    for item in items:
        keys.append(item["key"])
        keys.extend(menu_keys(item["children"]))
    return keys


def become(acting_user, user, **app_metadata):
    acting_user.clear()
    acting_user.update({"id": user.id, "email": f"{user.username.lower()}@example.com", "app_metadata": app_metadata})


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_catalog(client: TestClient):
    response = client.get("/api/v1/permissions/catalog")
    assert response.status_code == 200
    assert menu_keys(response.json()) == flatten_keys()


def test_resolve_without_rules_allows_everything(client: TestClient):
    response = client.get("/api/v1/permissions/me/units")
    assert response.status_code == 200
    data = response.json()
    assert data["page"] == "units"
    assert all(data[flag] for flag in ("can_view", "can_create", "can_update", "can_delete"))


def test_resolve_with_rule(client: TestClient, store):
    store.add(CLERK.id, "units", can_delete=False)
    data = client.get("/api/v1/permissions/me/units").json()
    assert data["can_delete"] is False
    assert data["can_view"] is True


def test_resolve_survives_store_outage(client: TestClient, store):
    store.add(CLERK.id, "units", can_view=False)
    store.fail_reads = True
    response = client.get("/api/v1/permissions/me/units")
    assert response.status_code == 200
    assert response.json()["can_view"] is True


def test_my_permissions_map(client: TestClient, store):
    store.add(CLERK.id, "rooms", can_create=False)
    data = client.get("/api/v1/permissions/me").json()
    assert data["is_super_user"] is False
    assert list(data["permissions"]) == flatten_keys()
    assert data["permissions"]["rooms"]["can_create"] is False


def test_menu_filtered_for_acting_user(client: TestClient, store):
    store.add(CLERK.id, "purchases", can_view=False)
    store.add(CLERK.id, "stock_products", can_view=False)
    store.add(CLERK.id, "product_movement", can_view=False)

    keys = menu_keys(client.get("/api/v1/permissions/me/menu").json())

    for hidden in ("purchases", "purchases_xml", "purchases_view", "stock", "stock_products"):
        assert hidden not in keys
    assert "units" in keys


def test_menu_for_super_user_is_complete(client: TestClient, store, acting_user):
    become(acting_user, ADMIN)
    store.add(ADMIN.id, "purchases", can_view=False)
    keys = menu_keys(client.get("/api/v1/permissions/me/menu").json())
    assert keys == flatten_keys()


def test_editor_requires_super_user(client: TestClient):
    assert client.get("/api/v1/permissions/users").status_code == 403
    assert client.get(f"/api/v1/permissions/users/{BUYER.id}").status_code == 403
    response = client.patch(
        f"/api/v1/permissions/users/{BUYER.id}/pages/units",
        json={"action": "can_delete", "value": False},
    )
    assert response.status_code == 403


def test_app_metadata_super_user(client: TestClient, acting_user):
    become(acting_user, CLERK, type="super_user")
    assert client.get("/api/v1/permissions/users").status_code == 200


def test_list_editable_users(client: TestClient, acting_user):
    become(acting_user, ADMIN)
    data = client.get("/api/v1/permissions/users").json()
    assert [u["id"] for u in data] == [CLERK.id, BUYER.id]


def test_editor_units_scenario(client: TestClient, acting_user):
    become(acting_user, ADMIN)

    before = client.get(f"/api/v1/permissions/users/{BUYER.id}").json()
    assert [row["page"] for row in before["rows"]] == flatten_keys()
    assert all(row["can_delete"] for row in before["rows"])

    response = client.patch(
        f"/api/v1/permissions/users/{BUYER.id}/pages/units",
        json={"action": "can_delete", "value": False},
    )
    assert response.status_code == 200
    assert response.json()["can_delete"] is False
    assert response.json()["can_view"] is True

    after = {row["page"]: row for row in client.get(f"/api/v1/permissions/users/{BUYER.id}").json()["rows"]}
    assert after["units"]["can_delete"] is False
    assert after["units"]["can_update"] is True
    assert after["rooms"]["can_delete"] is True


def test_set_flag_unknown_page(client: TestClient, acting_user):
    become(acting_user, ADMIN)
    response = client.patch(
        f"/api/v1/permissions/users/{BUYER.id}/pages/ghost",
        json={"action": "can_view", "value": False},
    )
    assert response.status_code == 404


def test_set_flag_unknown_action(client: TestClient, acting_user):
    become(acting_user, ADMIN)
    response = client.patch(
        f"/api/v1/permissions/users/{BUYER.id}/pages/units",
        json={"action": "can_export", "value": False},
    )
    assert response.status_code == 422


def test_matrix_unknown_user(client: TestClient, acting_user):
    become(acting_user, ADMIN)
    response = client.get("/api/v1/permissions/users/u-nobody")
    assert response.status_code == 404


def test_persist_failure_is_reported(client: TestClient, store, acting_user):
    become(acting_user, ADMIN)
    store.fail_writes = True
    response = client.patch(
        f"/api/v1/permissions/users/{BUYER.id}/pages/units",
        json={"action": "can_delete", "value": False},
    )
    assert response.status_code == 502
    assert "permission denied" in response.json()["detail"]


def test_set_flag_refuses_to_write_when_store_unreadable(client: TestClient, store, acting_user):
    stored = store.add(BUYER.id, "units", can_view=True, can_create=False, can_update=False, can_delete=True)
    become(acting_user, ADMIN)
    store.fail_reads = True

    response = client.patch(
        f"/api/v1/permissions/users/{BUYER.id}/pages/units",
        json={"action": "can_delete", "value": False},
    )

    assert response.status_code == 503
    assert "connection refused" in response.json()["detail"]
    assert store.upsert_calls == []
    assert store.rows[(BUYER.id, "units")] == stored


def test_super_user_resolves_allow_all(client: TestClient, store, acting_user):
    become(acting_user, ADMIN)
    store.add(ADMIN.id, "units", can_view=False, can_delete=False)

    record = client.get("/api/v1/permissions/me/units").json()
    assert record["can_view"] is True
    assert record["can_delete"] is True

    data = client.get("/api/v1/permissions/me").json()
    assert data["is_super_user"] is True
    assert data["permissions"]["units"]["can_view"] is True


def test_bulk_save(client: TestClient, store, acting_user):
    become(acting_user, ADMIN)
    response = client.put(
        f"/api/v1/permissions/users/{BUYER.id}",
        json={"entries": [{"page": "users", "can_view": False, "can_create": False,
                           "can_update": False, "can_delete": False}]},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["updated_count"] == len(flatten_keys())
    assert store.rows[(BUYER.id, "users")].can_view is False
    assert store.rows[(BUYER.id, "units")].can_view is True


def test_bulk_save_unknown_page(client: TestClient, acting_user):
    become(acting_user, ADMIN)
    response = client.put(f"/api/v1/permissions/users/{BUYER.id}", json={"entries": [{"page": "ghost"}]})
    assert response.status_code == 400


def test_deactivate(client: TestClient, store, acting_user):
    store.add(BUYER.id, "units", can_view=False)
    become(acting_user, ADMIN)

    response = client.delete(f"/api/v1/permissions/users/{BUYER.id}/pages/units")

    assert response.status_code == 204
    assert store.rows[(BUYER.id, "units")].is_active is False


def test_auth_me(client: TestClient, acting_user):
    data = client.get("/api/v1/auth/me").json()
    assert data["username"] == CLERK.username
    assert data["is_super_user"] is False

    become(acting_user, ADMIN)
    assert client.get("/api/v1/auth/me").json()["is_super_user"] is True
