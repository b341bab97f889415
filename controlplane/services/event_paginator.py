"""管理事件游标分页：按时间倒序，游标为上一页最后一条记录的时间戳。"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from controlplane.db.sqlite import SQLiteDB
from controlplane.db.sqlite.connection import format_cursor, format_timestamp
from controlplane.models.events import (
    AdminEvent,
    AdminEventPage,
    AdminEventView,
    Page,
)
from controlplane.services.errors import InvalidArgumentError
from controlplane.services.event_recorder import decode_admin_event

KEY_QUERY_PARAM = "ts"
LIMIT_QUERY_PARAM = "limit"


class AdminEventPaginator:
    def __init__(self, db: SQLiteDB, base_url: str = "", max_limit: int = 500) -> None:
        self._db = db
        self._base_url = base_url
        self._max_limit = max(int(max_limit), 1)

    def list_events(self, ts: Optional[datetime], limit: int) -> AdminEventPage:
        if int(limit) < 1:
            raise InvalidArgumentError("limit must be a positive integer")
        safe_limit = min(int(limit), self._max_limit)
        before = format_cursor(ts) if ts is not None else None
        rows = self._db.list_admin_events(before=before, limit=safe_limit)
        events = [decode_admin_event(row) for row in rows]

        next_page = None
        if events:
            next_page = Page(
                base_url=self._base_url,
                key_query_param=KEY_QUERY_PARAM,
                limit_query_param=LIMIT_QUERY_PARAM,
                key=format_timestamp(events[-1].timestamp),
                limit=safe_limit,
                relation="next",
            )
        return AdminEventPage(events=events, next=next_page)


def to_event_view(event: AdminEvent) -> AdminEventView:
    data = event.data
    view = AdminEventView(
        guid=event.guid,
        kind=data.kind,
        user=event.user,
        timestamp=format_timestamp(event.timestamp),
    )
    if data.kind == "config_change":
        view.before = data.before
        view.after = data.after
    elif data.kind == "task_restart":
        view.start_time = data.start_time
        view.end_time = data.end_time
        view.tasks_restarted = list(data.tasks_restarted)
        view.tasks_errored = list(data.tasks_errored)
    else:
        raise ValueError(f"unknown admin event kind: {data.kind}")
    return view
