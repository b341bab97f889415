"""admin_events 表操作（只追加，不更新不删除）。"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class SQLiteEventsRepo:
    def insert_admin_event(
        self,
        *,
        guid: str,
        kind: str,
        operator_username: str,
        payload_json: str,
        created_at: str,
    ) -> int:
        conn = self._get_conn()
        try:
            cursor = conn.cursor()
            cursor.execute(
                '''
                INSERT INTO admin_events (guid, kind, operator_username, payload_json, created_at)
                VALUES (?, ?, ?, ?, ?)
                ''',
                (guid, kind, operator_username, payload_json, created_at),
            )
            event_id = int(cursor.lastrowid)
            conn.commit()
        finally:
            conn.close()
        return event_id

    def get_admin_event(self, guid: str) -> Optional[Dict[str, Any]]:
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute('SELECT * FROM admin_events WHERE guid = ?', (str(guid),))
        row = cursor.fetchone()
        conn.close()
        return dict(row) if row else None

    def list_admin_events(self, *, before: Optional[str] = None, limit: int = 10) -> List[Dict[str, Any]]:
        safe_limit = max(int(limit), 1)
        params: List[Any] = []
        where_clause = ""
        if before:
            where_clause = "WHERE created_at < ?"
            params.append(before)
        sql = f"SELECT * FROM admin_events {where_clause} ORDER BY created_at DESC, id DESC LIMIT ?"
        params.append(safe_limit)

        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute(sql, params)
        rows = cursor.fetchall()
        conn.close()
        return [dict(row) for row in rows]

    def count_admin_events(self) -> int:
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute('SELECT COUNT(1) AS cnt FROM admin_events')
        row = cursor.fetchone()
        conn.close()
        return int(row["cnt"] if row else 0)
