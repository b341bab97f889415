"""SQLite schema 初始化。"""

from __future__ import annotations


class SQLiteSchemaMixin:
    def _init_db(self):
        conn = self._get_conn()
        cursor = conn.cursor()

        cursor.execute(
            '''
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT UNIQUE NOT NULL,
                password TEXT NOT NULL,
                role TEXT DEFAULT 'admin',
                created_at TIMESTAMP,
                updated_at TIMESTAMP
            )
            '''
        )

        # 全局唯一的管理配置文档，整行替换
        cursor.execute(
            '''
            CREATE TABLE IF NOT EXISTS admin_settings (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                payload_json TEXT NOT NULL,
                updated_by TEXT,
                updated_at TIMESTAMP NOT NULL
            )
            '''
        )

        cursor.execute(
            '''
            CREATE TABLE IF NOT EXISTS admin_events (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                guid TEXT UNIQUE NOT NULL,
                kind TEXT NOT NULL,
                operator_username TEXT NOT NULL,
                payload_json TEXT NOT NULL,
                created_at TIMESTAMP NOT NULL
            )
            '''
        )
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_admin_events_created ON admin_events(created_at DESC, id DESC)')

        cursor.execute(
            '''
            CREATE TABLE IF NOT EXISTS distros (
                id TEXT PRIMARY KEY,
                arch TEXT,
                provider TEXT,
                container_pool TEXT,
                updated_at TIMESTAMP
            )
            '''
        )

        cursor.execute(
            '''
            CREATE TABLE IF NOT EXISTS task_queues (
                distro TEXT PRIMARY KEY,
                queue_json TEXT NOT NULL,
                queue_length INTEGER NOT NULL DEFAULT 0,
                generated_at TIMESTAMP NOT NULL
            )
            '''
        )

        cursor.execute(
            '''
            CREATE TABLE IF NOT EXISTS tasks (
                id TEXT PRIMARY KEY,
                display_name TEXT,
                distro_id TEXT,
                project TEXT,
                build_variant TEXT,
                status TEXT NOT NULL,
                activated INTEGER NOT NULL DEFAULT 0,
                execution INTEGER NOT NULL DEFAULT 0,
                finish_time TIMESTAMP,
                updated_at TIMESTAMP
            )
            '''
        )
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_tasks_status_finish ON tasks(status, finish_time)')

        conn.commit()
        conn.close()
