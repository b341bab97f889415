"""按时间窗口重启失败任务。"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from controlplane.db.sqlite import SQLiteDB
from controlplane.db.sqlite.connection import format_timestamp
from controlplane.models.tasks import RestartTasksResponse
from controlplane.services.errors import InvalidArgumentError
from controlplane.services.event_recorder import AdminEventRecorder

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TaskRestartService:
    def __init__(self, db: SQLiteDB, recorder: AdminEventRecorder) -> None:
        self._db = db
        self.recorder = recorder

    def restart(self, start_time: datetime, end_time: datetime, *, dry_run: bool, user: str) -> RestartTasksResponse:
        start_utc = _as_utc(start_time)
        end_utc = _as_utc(end_time)
        if end_utc < start_utc:
            raise InvalidArgumentError("restart end time cannot be before start time")

        candidates = self._db.find_failed_tasks_between(format_timestamp(start_utc), format_timestamp(end_utc))
        result = RestartTasksResponse()
        if dry_run:
            result.tasks_restarted = [str(row["id"]) for row in candidates]
            return result

        for row in candidates:
            task_id = str(row["id"])
            try:
                if self._db.reset_task_for_restart(task_id):
                    result.tasks_restarted.append(task_id)
                else:
                    result.tasks_errored.append(task_id)
            except Exception:  # noqa: BLE001
                logger.exception("restarting task %s failed", task_id)
                result.tasks_errored.append(task_id)

        self.recorder.record_task_restart(
            start_time=start_utc,
            end_time=end_utc,
            tasks_restarted=result.tasks_restarted,
            tasks_errored=result.tasks_errored,
            user=user,
        )
        logger.info(
            "restart by %s: %d restarted, %d errored",
            user,
            len(result.tasks_restarted),
            len(result.tasks_errored),
        )
        return result
