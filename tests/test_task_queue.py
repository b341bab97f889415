import threading
import time

import pytest

from controlplane.models.task_queue import TaskQueueItem
from controlplane.services.errors import InvalidArgumentError
from controlplane.services.task_queue_service import TaskQueueService
from tests._harness import make_client, make_db

pytestmark = pytest.mark.unit


@pytest.fixture()
def temp_db(tmp_path):
    return make_db(tmp_path, "task-queue.db")


@pytest.fixture()
def queues(temp_db):
    return TaskQueueService(temp_db)


def _items(*ids):
    return [TaskQueueItem(id=task_id, display_name=f"{task_id}-name", priority=index) for index, task_id in enumerate(ids)]


def test_load_missing_queue_is_empty(queues):
    queue = queues.load("d1")
    assert queue.distro == "d1"
    assert queue.queue == []
    assert queue.generated_at is None


def test_save_replaces_whole_queue_in_order(queues):
    queues.save("d1", _items("task1", "task2", "task3"))
    queues.save("d1", _items("task4", "task2"))

    loaded = queues.load("d1")
    assert [item.id for item in loaded.queue] == ["task4", "task2"]
    assert loaded.queue[0].display_name == "task4-name"
    assert loaded.generated_at


def test_queues_are_keyed_by_distro(queues):
    queues.save("d1", _items("a"))
    queues.save("d2", _items("b", "c"))
    assert [item.id for item in queues.load("d1").queue] == ["a"]
    assert queues.lengths() == {"d1": 1, "d2": 2}


def test_clear_is_total_and_idempotent(queues, temp_db):
    queues.save("d1", _items("task1", "task2", "task3"))
    assert len(queues.load("d1").queue) == 3

    assert queues.clear("d1") == 3
    assert queues.load("d1").queue == []
    # 清空后保留空队列文档，而不是删除
    assert temp_db.get_task_queue("d1")["queue_json"] == "[]"

    assert queues.clear("d1") == 0
    assert queues.clear("never-saved") == 0
    assert queues.load("never-saved").queue == []


def test_clear_reports_length_committed_by_concurrent_writer(queues, temp_db):
    queues.save("d1", _items("task1", "task2", "task3"))

    # 模拟调度器：持有写锁，整体替换为 5 条但尚未提交
    writer = temp_db._get_conn()
    writer.execute("BEGIN IMMEDIATE")
    writer.execute("UPDATE task_queues SET queue_json = ?, queue_length = 5 WHERE distro = ?", ("[]", "d1"))

    results = []
    worker = threading.Thread(target=lambda: results.append(queues.clear("d1")))
    worker.start()
    time.sleep(0.3)
    writer.commit()
    writer.close()
    worker.join(timeout=10)

    assert results == [5]
    assert temp_db.get_task_queue("d1")["queue_length"] == 0


def test_remove_item_keeps_remaining_order(queues):
    queues.save("d1", _items("task1", "task2", "task3"))

    assert queues.remove_item("d1", "task2") is True
    assert queues.remove_item("d1", "task2") is False
    assert queues.remove_item("missing", "task1") is False
    assert [item.id for item in queues.load("d1").queue] == ["task1", "task3"]
    assert queues.lengths()["d1"] == 2


def test_empty_distro_is_invalid(queues):
    with pytest.raises(InvalidArgumentError):
        queues.save(" ", [])
    with pytest.raises(InvalidArgumentError):
        queues.load("")


def test_clear_task_queue_route(temp_db):
    queues = TaskQueueService(temp_db)
    queues.save("d1", _items("task1", "task2", "task3"))
    client = make_client(temp_db)

    resp = client.delete("/admin/task_queue", params={"distro": "d1"})
    assert resp.status_code == 200
    assert resp.json() == {"distro": "d1", "cleared": 3}

    queue_resp = client.get("/admin/task_queue", params={"distro": "d1"})
    assert queue_resp.status_code == 200
    assert queue_resp.json()["queue"] == []

    again = client.delete("/admin/task_queue", params={"distro": "d1"})
    assert again.status_code == 200
    assert again.json()["cleared"] == 0

    lengths = client.get("/admin/task_queue/lengths")
    assert lengths.json() == {"lengths": {"d1": 0}}


def test_clear_route_requires_distro(temp_db):
    client = make_client(temp_db)
    resp = client.delete("/admin/task_queue")
    assert resp.status_code == 422
