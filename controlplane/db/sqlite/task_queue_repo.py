"""task_queues 表操作：每个 distro 一行，队列整体以 JSON 存储。"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional


class SQLiteTaskQueueRepo:
    def save_task_queue(self, distro: str, queue_json: str, queue_length: int) -> str:
        now = self._now_str()
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute(
            '''
            INSERT INTO task_queues (distro, queue_json, queue_length, generated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(distro) DO UPDATE SET
                queue_json = excluded.queue_json,
                queue_length = excluded.queue_length,
                generated_at = excluded.generated_at
            ''',
            (str(distro), queue_json, int(queue_length), now),
        )
        conn.commit()
        conn.close()
        return now

    def get_task_queue(self, distro: str) -> Optional[Dict[str, Any]]:
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute(
            'SELECT distro, queue_json, queue_length, generated_at FROM task_queues WHERE distro = ?',
            (str(distro),),
        )
        row = cursor.fetchone()
        conn.close()
        return dict(row) if row else None

    def clear_task_queue(self, distro: str) -> int:
        """在同一事务内读取旧长度并写入空队列，返回被清掉的条目数。"""
        now = self._now_str()
        conn = self._get_conn()
        try:
            with self.transaction(conn) as cursor:
                cursor.execute('SELECT queue_length FROM task_queues WHERE distro = ?', (str(distro),))
                row = cursor.fetchone()
                previous = int(row["queue_length"] or 0) if row else 0
                cursor.execute(
                    '''
                    INSERT INTO task_queues (distro, queue_json, queue_length, generated_at)
                    VALUES (?, '[]', 0, ?)
                    ON CONFLICT(distro) DO UPDATE SET
                        queue_json = excluded.queue_json,
                        queue_length = excluded.queue_length,
                        generated_at = excluded.generated_at
                    ''',
                    (str(distro), now),
                )
        finally:
            conn.close()
        return previous

    def remove_task_queue_item(self, distro: str, task_id: str) -> bool:
        """在同一事务内读取、删除、写回，避免与调度器的整体替换交错。"""
        now = self._now_str()
        conn = self._get_conn()
        try:
            with self.transaction(conn) as cursor:
                cursor.execute('SELECT queue_json FROM task_queues WHERE distro = ?', (str(distro),))
                row = cursor.fetchone()
                if not row:
                    return False
                items = json.loads(row["queue_json"] or "[]")
                remaining = [item for item in items if str(item.get("id")) != str(task_id)]
                if len(remaining) == len(items):
                    return False
                cursor.execute(
                    'UPDATE task_queues SET queue_json = ?, queue_length = ?, generated_at = ? WHERE distro = ?',
                    (json.dumps(remaining, ensure_ascii=False), len(remaining), now, str(distro)),
                )
        finally:
            conn.close()
        return True

    def list_task_queue_lengths(self) -> Dict[str, int]:
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute('SELECT distro, queue_length FROM task_queues ORDER BY distro ASC')
        rows = cursor.fetchall()
        conn.close()
        return {str(row["distro"]): int(row["queue_length"] or 0) for row in rows}
