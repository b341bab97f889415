"""tasks 表操作（仅覆盖管理端重启所需字段）。"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class SQLiteTasksRepo:
    def upsert_task(self, data: Dict[str, Any]) -> None:
        task_id = str(data.get("id") or "").strip()
        if not task_id:
            raise ValueError("task id cannot be empty")
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute(
            '''
            INSERT INTO tasks (
                id, display_name, distro_id, project, build_variant, status,
                activated, execution, finish_time, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                display_name = excluded.display_name,
                distro_id = excluded.distro_id,
                project = excluded.project,
                build_variant = excluded.build_variant,
                status = excluded.status,
                activated = excluded.activated,
                execution = excluded.execution,
                finish_time = excluded.finish_time,
                updated_at = excluded.updated_at
            ''',
            (
                task_id,
                data.get("display_name"),
                data.get("distro_id"),
                data.get("project"),
                data.get("build_variant"),
                str(data.get("status") or "undispatched"),
                1 if data.get("activated") else 0,
                int(data.get("execution") or 0),
                data.get("finish_time"),
                self._now_str(),
            ),
        )
        conn.commit()
        conn.close()

    def get_task(self, task_id: str) -> Optional[Dict[str, Any]]:
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute('SELECT * FROM tasks WHERE id = ?', (str(task_id),))
        row = cursor.fetchone()
        conn.close()
        return dict(row) if row else None

    def find_failed_tasks_between(self, start_at: str, end_at: str) -> List[Dict[str, Any]]:
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute(
            '''
            SELECT *
            FROM tasks
            WHERE status = 'failed'
              AND finish_time >= ?
              AND finish_time <= ?
            ORDER BY finish_time ASC, id ASC
            ''',
            (start_at, end_at),
        )
        rows = cursor.fetchall()
        conn.close()
        return [dict(row) for row in rows]

    def reset_task_for_restart(self, task_id: str) -> bool:
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute(
            '''
            UPDATE tasks
            SET status = 'undispatched',
                activated = 1,
                execution = COALESCE(execution, 0) + 1,
                finish_time = NULL,
                updated_at = ?
            WHERE id = ? AND status = 'failed'
            ''',
            (self._now_str(), str(task_id)),
        )
        updated = cursor.rowcount > 0
        conn.commit()
        conn.close()
        return updated
