import pytest

from controlplane.services.errors import InvalidArgumentError, NotFoundError, SettingsValidationError
from controlplane.services.registry import build_services
from tests._harness import make_client, make_db, mock_admin_settings, seed_distros

pytestmark = pytest.mark.unit


@pytest.fixture()
def temp_db(tmp_path):
    db = make_db(tmp_path, "revert.db")
    seed_distros(db)
    return db


@pytest.fixture()
def services(temp_db):
    return build_services(temp_db)


@pytest.mark.asyncio
async def test_revert_restores_state_before_change(services, temp_db):
    base = mock_admin_settings(banner="base")
    change_a = mock_admin_settings(banner="change-a", super_users=["me"])
    change_b = mock_admin_settings(banner="change-b")

    await services.admin_settings.commit(base, "user")
    result_a = await services.admin_settings.commit(change_a, "user")
    await services.admin_settings.commit(change_b, "user")
    assert result_a.event is not None

    result = await services.revert_engine.revert(result_a.event.guid, "reverter")

    live = services.settings_store.get()
    assert live == base
    assert result.restored == base
    assert result.event is not None
    assert result.event.user == "reverter"
    assert result.event.data.after == base
    assert result.event.data.before == change_b
    assert temp_db.count_admin_events() == 4


@pytest.mark.asyncio
async def test_revert_rejects_empty_guid_without_writing(services, temp_db):
    with pytest.raises(InvalidArgumentError):
        await services.revert_engine.revert("", "user")
    assert temp_db.get_admin_settings_row() is None
    assert temp_db.count_admin_events() == 0


@pytest.mark.asyncio
async def test_revert_unknown_guid_is_not_found(services, temp_db):
    with pytest.raises(NotFoundError):
        await services.revert_engine.revert("does-not-exist", "user")
    assert temp_db.count_admin_events() == 0


@pytest.mark.asyncio
async def test_revert_revalidates_against_current_distros(services, temp_db):
    base = mock_admin_settings(banner="base")
    await services.admin_settings.commit(base, "user")
    change = mock_admin_settings(banner="no-pools", container_pools={"pools": []})
    result = await services.admin_settings.commit(change, "user")

    temp_db.delete_distro("valid-distro")

    with pytest.raises(SettingsValidationError) as exc_info:
        await services.revert_engine.revert(result.event.guid, "user")
    assert "error finding distro for container pool test-pool-1" in exc_info.value.messages
    assert services.settings_store.get().banner == "no-pools"
    assert temp_db.count_admin_events() == 2


@pytest.mark.asyncio
async def test_task_restart_events_cannot_be_reverted(services):
    from datetime import datetime, timezone

    event = services.recorder.record_task_restart(
        start_time=datetime(2026, 1, 1, tzinfo=timezone.utc),
        end_time=datetime(2026, 1, 2, tzinfo=timezone.utc),
        tasks_restarted=[],
        tasks_errored=[],
        user="ops",
    )
    with pytest.raises(InvalidArgumentError):
        await services.revert_engine.revert(event.guid, "user")


def test_revert_route(temp_db):
    client = make_client(temp_db, username="userName")
    client.post("/admin/settings", json=mock_admin_settings(banner="first").model_dump(mode="json"))
    client.post("/admin/settings", json=mock_admin_settings(banner="second").model_dump(mode="json"))
    guid = temp_db.list_admin_events(limit=1)[0]["guid"]

    resp = client.post("/admin/revert", json={"guid": guid})
    assert resp.status_code == 200
    assert resp.json() == {}
    assert client.get("/admin/settings").json()["data"]["banner"] == "first"

    latest = temp_db.list_admin_events(limit=1)[0]
    assert latest["operator_username"] == "userName"

    empty = client.post("/admin/revert", json={"guid": ""})
    assert empty.status_code == 400
    assert empty.json()["error"]["type"] == "invalid_argument"

    missing = client.post("/admin/revert", json={"guid": "nope"})
    assert missing.status_code == 404


def test_revert_route_treats_null_guid_as_empty(temp_db):
    client = make_client(temp_db)
    client.post("/admin/settings", json=mock_admin_settings(banner="first").model_dump(mode="json"))
    before_count = temp_db.count_admin_events()

    resp = client.post("/admin/revert", json={"guid": None})

    assert resp.status_code == 400
    assert resp.json()["error"]["type"] == "invalid_argument"
    assert temp_db.count_admin_events() == before_count
