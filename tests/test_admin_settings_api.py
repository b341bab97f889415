import pytest
from fastapi.testclient import TestClient

from controlplane.core.auth import get_current_user
from controlplane.main import create_app
from tests._harness import make_client, make_db, mock_admin_settings, seed_distros

pytestmark = pytest.mark.unit


@pytest.fixture()
def temp_db(tmp_path):
    db = make_db(tmp_path, "admin-settings.db")
    seed_distros(db)
    return db


@pytest.fixture()
def client(temp_db):
    test_client = make_client(temp_db)
    try:
        yield test_client
    finally:
        test_client.app.dependency_overrides.clear()


def test_get_settings_serves_defaults_before_first_write(client):
    resp = client.get("/admin/settings")
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["data"]["api_url"] == ""
    assert payload["data"]["scheduler"]["task_finder"] == "legacy"
    assert payload["updated_at"] is None
    assert payload["warnings"] == []


def test_post_then_get_round_trips_every_section(client):
    settings = mock_admin_settings()
    post_resp = client.post("/admin/settings", json=settings.model_dump(mode="json"))
    assert post_resp.status_code == 200
    assert post_resp.json()["warnings"] == []

    get_resp = client.get("/admin/settings")
    assert get_resp.status_code == 200
    data = get_resp.json()["data"]
    assert data == settings.model_dump(mode="json")
    assert data["alerts"]["smtp"]["port"] == 2285
    assert data["auth"]["naive"]["users"][0]["username"] == "user"
    assert data["container_pools"]["pools"][0]["max_containers"] == 100
    assert data["providers"]["openstack"]["identity_endpoint"] == "endpoint"
    assert data["service_flags"]["hostinit_disabled"] is True
    assert get_resp.json()["updated_at"]


def test_post_aggregates_validation_errors(client):
    bad = mock_admin_settings(api_url="")
    bad.ui.csrf_key = "12345"

    resp = client.post("/admin/settings", json=bad.model_dump(mode="json"))

    assert resp.status_code == 400
    body = resp.json()
    assert "API hostname must not be empty" in body["detail"]
    assert "CSRF key must be 32 characters long" in body["detail"]
    assert body["error"]["type"] == "settings_validation_error"
    assert len(body["error"]["meta"]["errors"]) == 2


def test_post_reports_invalid_container_pools_and_keeps_store(client):
    client.post("/admin/settings", json=mock_admin_settings().model_dump(mode="json"))
    bad = mock_admin_settings(
        container_pools={
            "pools": [
                {"id": "test-pool-1", "distro": "valid-distro", "max_containers": 100},
                {"id": "test-pool-2", "distro": "invalid-distro", "max_containers": 100},
                {"id": "test-pool-3", "distro": "missing-distro", "max_containers": 100},
            ]
        }
    )

    resp = client.post("/admin/settings", json=bad.model_dump(mode="json"))

    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert "container pool test-pool-2 has invalid distro" in detail
    assert "error finding distro for container pool test-pool-3" in detail
    assert "test-pool-1" not in detail

    pools = client.get("/admin/settings").json()["data"]["container_pools"]["pools"]
    assert [pool["id"] for pool in pools] == ["test-pool-1"]


def test_post_records_audit_event_with_principal(client, temp_db):
    settings = mock_admin_settings()
    client.post("/admin/settings", json=settings.model_dump(mode="json"))

    rows = temp_db.list_admin_events(limit=10)
    assert len(rows) == 1
    assert rows[0]["operator_username"] == "user"
    assert rows[0]["kind"] == "config_change"


def test_malformed_body_is_rejected_with_422(client):
    resp = client.post("/admin/settings", json={"container_pools": {"pools": [{"distro": "x"}]}})
    assert resp.status_code == 422
    assert resp.json()["error"]["type"] == "validation_error"


def test_admin_routes_require_authentication(temp_db):
    app = create_app(temp_db)
    test_client = TestClient(app, raise_server_exceptions=False)
    resp = test_client.get("/admin/settings")
    assert resp.status_code == 401


def test_non_admin_user_is_forbidden(temp_db):
    app = create_app(temp_db)
    app.dependency_overrides[get_current_user] = lambda: {"id": 2, "username": "viewer", "role": "viewer"}
    test_client = TestClient(app, raise_server_exceptions=False)
    resp = test_client.get("/admin/settings")
    assert resp.status_code == 403
