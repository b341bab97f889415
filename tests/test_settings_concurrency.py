import asyncio
import threading

import pytest

from controlplane.models.settings import AdminSettings
from controlplane.services.admin_settings import AdminSettingsService
from controlplane.services.event_recorder import AdminEventRecorder, decode_admin_event
from controlplane.services.settings_store import AdminSettingsStore
from tests._harness import make_db, mock_admin_settings, seed_distros

pytestmark = pytest.mark.unit

WRITERS = 16


def test_concurrent_commits_chain_before_to_replaced_document(tmp_path):
    db = make_db(tmp_path, "concurrency.db")
    seed_distros(db)
    service = AdminSettingsService(AdminSettingsStore(db), AdminEventRecorder(db))

    start = threading.Barrier(WRITERS)
    failures = []

    def _commit(index: int) -> None:
        start.wait()
        try:
            asyncio.run(service.commit(mock_admin_settings(banner=f"writer-{index}"), f"user-{index}"))
        except Exception as exc:  # noqa: BLE001
            failures.append(exc)

    threads = [threading.Thread(target=_commit, args=(index,)) for index in range(WRITERS)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert failures == []
    events = [decode_admin_event(row) for row in db.list_admin_events(limit=WRITERS * 2)]
    assert len(events) == WRITERS

    befores = [event.data.before.banner for event in events]
    afters = {event.data.after.banner for event in events}
    default_banner = AdminSettings().banner

    # 每个 before 恰好是被替换的那份文档：互不重复，且只有第一次提交看到默认文档
    assert len(set(befores)) == WRITERS
    assert befores.count(default_banner) == 1
    assert set(befores) - {default_banner} <= afters

    # 链尾就是当前生效的文档
    live = service.store.get().banner
    assert live in afters
    assert live not in befores
