"""服务装配：所有服务共享启动时创建的同一个存储句柄。"""
from __future__ import annotations

from dataclasses import dataclass

from controlplane.core.config import settings
from controlplane.db.sqlite import SQLiteDB
from controlplane.services.admin_settings import AdminSettingsService
from controlplane.services.event_paginator import AdminEventPaginator
from controlplane.services.event_recorder import AdminEventRecorder
from controlplane.services.revert_engine import RevertEngine
from controlplane.services.settings_notifier import SettingsChangeNotifier
from controlplane.services.settings_store import AdminSettingsStore
from controlplane.services.task_queue_service import TaskQueueService
from controlplane.services.task_restart import TaskRestartService


@dataclass
class ControlPlaneServices:
    db: SQLiteDB
    settings_store: AdminSettingsStore
    recorder: AdminEventRecorder
    admin_settings: AdminSettingsService
    paginator: AdminEventPaginator
    revert_engine: RevertEngine
    task_queues: TaskQueueService
    task_restart: TaskRestartService


def build_services(db: SQLiteDB) -> ControlPlaneServices:
    store = AdminSettingsStore(db)
    recorder = AdminEventRecorder(db)
    notifier = SettingsChangeNotifier(
        api_base=settings.slack_api_base,
        timeout_seconds=settings.outbound_timeout_seconds,
    )
    admin_settings = AdminSettingsService(store, recorder, notifier)
    return ControlPlaneServices(
        db=db,
        settings_store=store,
        recorder=recorder,
        admin_settings=admin_settings,
        paginator=AdminEventPaginator(
            db,
            base_url=f"{settings.public_url.rstrip('/')}/admin/events",
            max_limit=settings.events_max_limit,
        ),
        revert_engine=RevertEngine(admin_settings, recorder),
        task_queues=TaskQueueService(db),
        task_restart=TaskRestartService(db, recorder),
    )
