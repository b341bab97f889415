"""管理配置文档存储"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from controlplane.db.sqlite import SQLiteDB
from controlplane.models.distro import Distro
from controlplane.models.settings import AdminSettings
from controlplane.services.errors import SettingsValidationError
from controlplane.services.settings_validator import validate_admin_settings

logger = logging.getLogger(__name__)


def _decode_settings(raw: Optional[str]) -> Optional[AdminSettings]:
    if not raw:
        return None
    try:
        payload: Dict[str, Any] = json.loads(raw)
        return AdminSettings.model_validate(payload)
    except Exception:  # noqa: BLE001
        logger.warning("stored admin settings could not be decoded, serving defaults")
        return None


def encode_settings(value: AdminSettings) -> str:
    return json.dumps(value.model_dump(mode="json"), ensure_ascii=False, sort_keys=True)


class AdminSettingsStore:
    def __init__(self, db: SQLiteDB) -> None:
        self._db = db

    def find_distro(self, distro_id: str) -> Optional[Distro]:
        row = self._db.get_distro(distro_id)
        if not row:
            return None
        return Distro.model_validate(row)

    def get(self) -> AdminSettings:
        settings_obj, _ = self.get_with_timestamp()
        return settings_obj

    def get_with_timestamp(self) -> Tuple[AdminSettings, Optional[str]]:
        row = self._db.get_admin_settings_row()
        if not row:
            return AdminSettings(), None
        return _decode_settings(row.get("payload_json")) or AdminSettings(), row.get("updated_at")

    def validate(self, candidate: AdminSettings) -> List[str]:
        return validate_admin_settings(candidate, self.find_distro)

    def set(self, candidate: AdminSettings, principal: str) -> Tuple[AdminSettings, str]:
        """校验通过后整体替换，返回 (被替换的旧文档, updated_at)。

        校验失败抛出 SettingsValidationError，存储保持不变。
        """
        errors = self.validate(candidate)
        if errors:
            raise SettingsValidationError(errors)

        old_raw, updated_at = self._db.replace_admin_settings(encode_settings(candidate), principal)
        before = _decode_settings(old_raw) or AdminSettings()
        logger.info("admin settings replaced by %s", principal)
        return before, updated_at
