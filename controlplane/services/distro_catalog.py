"""Distro 目录初始化：从 JSON 文件批量写入 distros 表。

文件内容可以是 distro 列表，也可以是 `{"distros": [...]}`。
"""
from __future__ import annotations

import json
import logging
from typing import Iterable, List

from pydantic import TypeAdapter

from controlplane.db.sqlite import SQLiteDB
from controlplane.models.distro import Distro

logger = logging.getLogger(__name__)

_distro_list_adapter: TypeAdapter = TypeAdapter(List[Distro])


def load_distros_file(path: str) -> List[Distro]:
    with open(path, "r", encoding="utf-8") as fp:
        payload = json.load(fp)
    if isinstance(payload, dict):
        payload = payload.get("distros") or []
    return _distro_list_adapter.validate_python(payload)


def seed_distros(db: SQLiteDB, distros: Iterable[Distro]) -> List[Distro]:
    """逐条 upsert，返回写入后的完整目录。"""
    count = 0
    for distro in distros:
        db.upsert_distro(distro.model_dump())
        count += 1
    logger.info("seeded %d distros", count)
    return [Distro.model_validate(row) for row in db.list_distros()]
