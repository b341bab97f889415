"""SQLite 持久化。

说明：
- `SQLiteDB` 由具体表操作 mixin 组合而成，见 `controlplane/db/sqlite/*.py`。
- 不提供模块级单例：进程启动时创建一次，显式传入各服务。
"""

from __future__ import annotations

from controlplane.db.sqlite.connection import SQLiteConnectionMixin
from controlplane.db.sqlite.distros_repo import SQLiteDistrosRepo
from controlplane.db.sqlite.events_repo import SQLiteEventsRepo
from controlplane.db.sqlite.schema import SQLiteSchemaMixin
from controlplane.db.sqlite.settings_repo import SQLiteSettingsRepo
from controlplane.db.sqlite.task_queue_repo import SQLiteTaskQueueRepo
from controlplane.db.sqlite.tasks_repo import SQLiteTasksRepo
from controlplane.db.sqlite.users_repo import SQLiteUsersRepo


class SQLiteDB(
    SQLiteConnectionMixin,
    SQLiteSchemaMixin,
    SQLiteUsersRepo,
    SQLiteSettingsRepo,
    SQLiteEventsRepo,
    SQLiteDistrosRepo,
    SQLiteTaskQueueRepo,
    SQLiteTasksRepo,
):
    def __init__(self, db_path: str = "data/controlplane.db"):
        self._db_path = str(db_path)
        self._ensure_data_dir()
        self._init_db()
