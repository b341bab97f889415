"""distros 表操作。"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class SQLiteDistrosRepo:
    def upsert_distro(self, data: Dict[str, Any]) -> None:
        distro_id = str(data.get("id") or "").strip()
        if not distro_id:
            raise ValueError("distro id cannot be empty")
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute(
            '''
            INSERT INTO distros (id, arch, provider, container_pool, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                arch = excluded.arch,
                provider = excluded.provider,
                container_pool = excluded.container_pool,
                updated_at = excluded.updated_at
            ''',
            (
                distro_id,
                data.get("arch") or "",
                data.get("provider") or "",
                data.get("container_pool") or None,
                self._now_str(),
            ),
        )
        conn.commit()
        conn.close()

    def get_distro(self, distro_id: str) -> Optional[Dict[str, Any]]:
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute('SELECT id, arch, provider, container_pool FROM distros WHERE id = ?', (str(distro_id),))
        row = cursor.fetchone()
        conn.close()
        return dict(row) if row else None

    def list_distros(self) -> List[Dict[str, Any]]:
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute('SELECT id, arch, provider, container_pool FROM distros ORDER BY id ASC')
        rows = cursor.fetchall()
        conn.close()
        return [dict(row) for row in rows]

    def delete_distro(self, distro_id: str) -> bool:
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute('DELETE FROM distros WHERE id = ?', (str(distro_id),))
        deleted = cursor.rowcount > 0
        conn.commit()
        conn.close()
        return deleted
