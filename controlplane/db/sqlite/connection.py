"""SQLite 连接与基础工具。"""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Iterator

from pydantic import TypeAdapter

from controlplane.services.errors import StorageUnavailableError

_datetime_adapter: TypeAdapter = TypeAdapter(datetime)


class SQLiteConnectionMixin:
    _db_path: str

    def _ensure_data_dir(self) -> None:
        data_dir = os.path.dirname(self._db_path)
        if data_dir:
            os.makedirs(data_dir, exist_ok=True)

    def _now_str(self) -> str:
        return format_timestamp(datetime.now(timezone.utc))

    def _get_conn(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self._db_path, timeout=5.0)
        except sqlite3.Error as exc:
            raise StorageUnavailableError(f"cannot open database {self._db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
            conn.execute("PRAGMA foreign_keys=ON")
            conn.execute("PRAGMA busy_timeout=5000")
        except sqlite3.Error:
            pass
        return conn

    @contextmanager
    def transaction(self, conn: sqlite3.Connection, *, immediate: bool = True) -> Iterator[sqlite3.Cursor]:
        """统一事务包装。

        默认使用 `BEGIN IMMEDIATE`：先读后写的序列（读旧文档再替换、队列出队）
        在同一个写锁内完成，读者只会看到完整的旧值或新值。
        """
        cursor = conn.cursor()
        try:
            cursor.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            yield cursor
            conn.commit()
        except Exception:
            conn.rollback()
            raise


def format_timestamp(value: datetime) -> str:
    """UTC 毫秒精度、定宽 ISO 文本：字符串顺序与时间顺序一致。"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def format_cursor(value: datetime) -> str:
    """游标向上取整到毫秒：`created_at < cursor` 不会漏掉同一毫秒内更早的记录。"""
    remainder = value.microsecond % 1000
    if remainder:
        value = value + timedelta(microseconds=1000 - remainder)
    return format_timestamp(value)


def parse_timestamp(text: str) -> datetime:
    """解析 RFC3339 文本（大小写 T/Z 均可，小数位数不限），统一为 UTC。"""
    normalized = str(text or "").strip().upper()
    value = _datetime_adapter.validate_python(normalized)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
