"""分发队列存储：按 distro 整体替换、加载、清空。"""
from __future__ import annotations

import json
import logging
from typing import Dict, Iterable, List

from controlplane.db.sqlite import SQLiteDB
from controlplane.models.task_queue import TaskQueue, TaskQueueItem
from controlplane.services.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def _require_distro(distro: str) -> str:
    text = str(distro or "").strip()
    if not text:
        raise InvalidArgumentError("distro must not be empty")
    return text


class TaskQueueService:
    def __init__(self, db: SQLiteDB) -> None:
        self._db = db

    def save(self, distro: str, items: Iterable[TaskQueueItem]) -> TaskQueue:
        safe_distro = _require_distro(distro)
        queue: List[TaskQueueItem] = list(items)
        payload = json.dumps([item.model_dump(mode="json") for item in queue], ensure_ascii=False)
        generated_at = self._db.save_task_queue(safe_distro, payload, len(queue))
        return TaskQueue(distro=safe_distro, queue=queue, generated_at=generated_at)

    def load(self, distro: str) -> TaskQueue:
        safe_distro = _require_distro(distro)
        row = self._db.get_task_queue(safe_distro)
        if not row:
            return TaskQueue(distro=safe_distro)
        raw_items = json.loads(row.get("queue_json") or "[]")
        return TaskQueue(
            distro=safe_distro,
            queue=[TaskQueueItem.model_validate(item) for item in raw_items],
            generated_at=row.get("generated_at"),
        )

    def clear(self, distro: str) -> int:
        """清空队列并返回被移除的条目数；重复清空返回 0。"""
        safe_distro = _require_distro(distro)
        previous = self._db.clear_task_queue(safe_distro)
        logger.info("task queue for distro %s cleared (%d items)", safe_distro, previous)
        return previous

    def remove_item(self, distro: str, task_id: str) -> bool:
        safe_distro = _require_distro(distro)
        safe_task_id = str(task_id or "").strip()
        if not safe_task_id:
            raise InvalidArgumentError("task id must not be empty")
        return self._db.remove_task_queue_item(safe_distro, safe_task_id)

    def lengths(self) -> Dict[str, int]:
        return self._db.list_task_queue_lengths()
