"""管理配置文档表操作。"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple


class SQLiteSettingsRepo:
    def get_admin_settings_row(self) -> Optional[Dict[str, Any]]:
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute('SELECT payload_json, updated_by, updated_at FROM admin_settings WHERE id = 1')
        row = cursor.fetchone()
        conn.close()
        if not row:
            return None
        return dict(row)

    def replace_admin_settings(self, payload_json: str, updated_by: str) -> Tuple[Optional[str], str]:
        """整文档替换，返回 (被替换的 payload_json, updated_at)。

        读旧值与写新值处于同一个 IMMEDIATE 事务中，返回的旧值就是本次被覆盖的文档。
        """
        now = self._now_str()
        conn = self._get_conn()
        try:
            with self.transaction(conn) as cursor:
                cursor.execute('SELECT payload_json FROM admin_settings WHERE id = 1')
                row = cursor.fetchone()
                cursor.execute(
                    'INSERT OR REPLACE INTO admin_settings (id, payload_json, updated_by, updated_at) VALUES (1, ?, ?, ?)',
                    (payload_json, updated_by, now),
                )
        finally:
            conn.close()
        return (row["payload_json"] if row else None), now
