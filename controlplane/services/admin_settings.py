"""管理配置服务：校验 -> 提交 -> 审计 -> 通知。"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from controlplane.models.events import AdminEvent
from controlplane.models.settings import AdminSettings, AdminSettingsEnvelope
from controlplane.services.event_recorder import AdminEventRecorder
from controlplane.services.settings_notifier import SettingsChangeNotifier
from controlplane.services.settings_store import AdminSettingsStore

logger = logging.getLogger(__name__)


@dataclass
class CommitResult:
    before: AdminSettings
    after: AdminSettings
    updated_at: str
    event: Optional[AdminEvent] = None
    warnings: List[str] = field(default_factory=list)


class AdminSettingsService:
    def __init__(
        self,
        store: AdminSettingsStore,
        recorder: AdminEventRecorder,
        notifier: Optional[SettingsChangeNotifier] = None,
    ) -> None:
        self.store = store
        self.recorder = recorder
        self.notifier = notifier

    def get_envelope(self) -> AdminSettingsEnvelope:
        data, updated_at = self.store.get_with_timestamp()
        return AdminSettingsEnvelope(data=data, updated_at=updated_at)

    async def commit(self, candidate: AdminSettings, principal: str, *, action: str = "updated") -> CommitResult:
        """提交配置；校验失败抛 SettingsValidationError 且不落库。

        提交成功后审计写入失败或通知失败都只记入 warnings，不回滚已生效的配置。
        """
        after = candidate.model_copy(deep=True)
        before, updated_at = self.store.set(after, principal)
        result = CommitResult(before=before, after=after, updated_at=updated_at)

        try:
            result.event = self.recorder.record_config_change(before, after, principal)
        except Exception as exc:  # noqa: BLE001
            logger.exception("admin settings committed by %s but audit append failed", principal)
            result.warnings.append(f"settings were saved but the audit event could not be recorded: {exc}")

        if self.notifier is not None:
            warning = await self.notifier.notify(
                after,
                principal=principal,
                guid=result.event.guid if result.event else None,
                action=action,
            )
            if warning:
                result.warnings.append(warning)
        return result

    async def update(self, candidate: AdminSettings, principal: str) -> AdminSettingsEnvelope:
        result = await self.commit(candidate, principal)
        return AdminSettingsEnvelope(data=result.after, updated_at=result.updated_at, warnings=result.warnings)
