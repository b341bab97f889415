"""管理事件记录：每次配置变更写入一条不可变的审计记录。"""
from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from pydantic import TypeAdapter

from controlplane.db.sqlite import SQLiteDB
from controlplane.db.sqlite.connection import format_timestamp, parse_timestamp
from controlplane.models.events import (
    AdminEvent,
    AdminEventData,
    ConfigChangeEventData,
    TaskRestartEventData,
)
from controlplane.models.settings import AdminSettings

logger = logging.getLogger(__name__)

_event_data_adapter: TypeAdapter = TypeAdapter(AdminEventData)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def decode_admin_event(row: Dict[str, Any]) -> AdminEvent:
    payload = json.loads(row["payload_json"])
    payload.setdefault("kind", row.get("kind"))
    return AdminEvent(
        guid=str(row["guid"]),
        timestamp=parse_timestamp(row["created_at"]),
        user=str(row.get("operator_username") or ""),
        data=_event_data_adapter.validate_python(payload),
    )


class AdminEventRecorder:
    def __init__(self, db: SQLiteDB, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._db = db
        self._clock = clock or _utcnow
        self._lock = threading.Lock()
        self._last_timestamp: Optional[datetime] = None

    def _next_timestamp(self) -> datetime:
        """毫秒精度且在本进程内严格递增，分页游标不会跳过同一毫秒内的记录。"""
        with self._lock:
            value = parse_timestamp(format_timestamp(self._clock()))
            if self._last_timestamp is not None and value <= self._last_timestamp:
                value = self._last_timestamp + timedelta(milliseconds=1)
            self._last_timestamp = value
            return value

    def _append(self, data: ConfigChangeEventData | TaskRestartEventData, user: str) -> AdminEvent:
        event = AdminEvent(
            guid=uuid4().hex,
            timestamp=self._next_timestamp(),
            user=str(user or ""),
            data=data,
        )
        self._db.insert_admin_event(
            guid=event.guid,
            kind=data.kind,
            operator_username=event.user,
            payload_json=json.dumps(data.model_dump(mode="json"), ensure_ascii=False),
            created_at=format_timestamp(event.timestamp),
        )
        logger.info("admin event %s (%s) recorded for %s", event.guid, data.kind, event.user)
        return event

    def record_config_change(self, before: AdminSettings, after: AdminSettings, user: str) -> AdminEvent:
        return self._append(ConfigChangeEventData(before=before, after=after), user)

    def record_task_restart(
        self,
        *,
        start_time: datetime,
        end_time: datetime,
        tasks_restarted: List[str],
        tasks_errored: List[str],
        user: str,
    ) -> AdminEvent:
        data = TaskRestartEventData(
            start_time=start_time,
            end_time=end_time,
            tasks_restarted=list(tasks_restarted),
            tasks_errored=list(tasks_errored),
        )
        return self._append(data, user)

    def find(self, guid: str) -> Optional[AdminEvent]:
        row = self._db.get_admin_event(guid)
        if not row:
            return None
        return decode_admin_event(row)
