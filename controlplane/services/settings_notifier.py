"""配置变更后的 Slack 通知（提交后尽力而为，失败只产生告警）。"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from controlplane.models.settings import AdminSettings

logger = logging.getLogger(__name__)


class SettingsChangeNotifier:
    def __init__(
        self,
        api_base: str = "https://slack.com/api",
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_base = str(api_base or "").rstrip("/")
        self.timeout_seconds = float(timeout_seconds)
        # 可注入 transport，便于 unit test 使用 httpx.MockTransport
        self.transport = transport

    def is_enabled(self, current: AdminSettings) -> bool:
        slack = current.slack
        if current.service_flags.slack_notifications_disabled:
            return False
        return bool(slack.token and slack.options.channel)

    def _build_text(self, current: AdminSettings, principal: str, guid: Optional[str], action: str) -> str:
        source = current.slack.options.hostname or current.api_url or "control plane"
        text = f"[{source}] admin settings {action} by {principal}"
        if guid:
            text = f"{text} (event {guid})"
        return text

    async def notify(
        self,
        current: AdminSettings,
        *,
        principal: str,
        guid: Optional[str] = None,
        action: str = "updated",
    ) -> Optional[str]:
        """返回 None 表示已发送或无需发送；否则返回告警文本。"""
        if not self.is_enabled(current):
            return None
        slack = current.slack
        payload = {
            "channel": slack.options.channel,
            "text": self._build_text(current, principal, guid, action),
        }
        if slack.options.username:
            payload["username"] = slack.options.username
        if slack.options.icon_url:
            payload["icon_url"] = slack.options.icon_url

        timeout = httpx.Timeout(timeout=self.timeout_seconds)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
                resp = await client.post(
                    f"{self.api_base}/chat.postMessage",
                    json=payload,
                    headers={"Authorization": f"Bearer {slack.token}"},
                )
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("slack settings notification failed: %s", exc)
            return f"slack notification failed: {exc}"
        if isinstance(body, dict) and not body.get("ok", False):
            error = body.get("error") or "unknown error"
            logger.warning("slack settings notification rejected: %s", error)
            return f"slack notification rejected: {error}"
        return None
