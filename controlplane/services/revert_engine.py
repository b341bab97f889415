"""配置回滚：以某条审计记录的 before 快照作为新的候选文档重新提交。"""
from __future__ import annotations

import logging

from controlplane.models.events import RevertResult
from controlplane.services.admin_settings import AdminSettingsService
from controlplane.services.errors import InvalidArgumentError, NotFoundError
from controlplane.services.event_recorder import AdminEventRecorder

logger = logging.getLogger(__name__)


class RevertEngine:
    def __init__(self, settings_service: AdminSettingsService, recorder: AdminEventRecorder) -> None:
        self.settings_service = settings_service
        self.recorder = recorder

    async def revert(self, guid: str, principal: str) -> RevertResult:
        safe_guid = str(guid or "").strip()
        if not safe_guid:
            raise InvalidArgumentError("revert guid must not be empty")

        event = self.recorder.find(safe_guid)
        if event is None:
            raise NotFoundError(f"admin event {safe_guid} not found")
        if event.data.kind != "config_change":
            raise InvalidArgumentError(f"admin event {safe_guid} is a {event.data.kind} event and cannot be reverted")

        # 走与普通编辑相同的提交路径：快照必须按当前 distro 状态重新校验
        result = await self.settings_service.commit(event.data.before, principal, action=f"reverted to before {safe_guid}")
        logger.info("admin event %s reverted by %s", safe_guid, principal)
        return RevertResult(
            guid=safe_guid,
            restored=result.after,
            event=result.event,
            warnings=result.warnings,
        )
