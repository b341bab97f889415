"""管理配置校验

`validate_admin_settings` 是纯函数：按分节逐项检查候选文档，收集全部问题后一次返回，
不会在第一处错误处中断。返回空列表表示可以提交。
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from controlplane.models.distro import Distro
from controlplane.models.settings import (
    AdminSettings,
    AmboyConfig,
    ContainerPoolsConfig,
    JiraConfig,
    LoggerConfig,
    NotifyConfig,
    RepoTrackerConfig,
    SMTPConfig,
    UIConfig,
)

logger = logging.getLogger(__name__)

CSRF_KEY_LENGTH = 32
VALID_LOG_LEVELS = {"emergency", "alert", "critical", "error", "warning", "notice", "info", "debug", "trace"}
VALID_TASK_FINDERS = {"legacy", "parallel", "pipeline", "alternate"}

DistroLookup = Callable[[str], Optional[Distro]]


def _validate_root(candidate: AdminSettings) -> List[str]:
    errors: List[str] = []
    if not candidate.api_url:
        errors.append("API hostname must not be empty")
    for name in candidate.super_users:
        if not str(name or "").strip():
            errors.append("super user names must not be empty")
            break
    return errors


def _validate_ui(ui: UIConfig) -> List[str]:
    errors: List[str] = []
    if not ui.secret:
        errors.append("UI secret must not be empty")
    if not ui.default_project:
        errors.append("You must specify a default project in UI")
    if not ui.url:
        errors.append("You must specify a default UI url")
    if ui.csrf_key and len(ui.csrf_key) != CSRF_KEY_LENGTH:
        errors.append("CSRF key must be 32 characters long")
    return errors


def _validate_smtp(smtp: SMTPConfig, section: str) -> List[str]:
    errors: List[str] = []
    if not smtp.server:
        return errors
    if not smtp.from_address:
        errors.append(f"{section} SMTP from address must not be empty")
    if smtp.port < 1 or smtp.port > 65535:
        errors.append(f"{section} SMTP port {smtp.port} is out of range")
    return errors


def _validate_notify(notify: NotifyConfig) -> List[str]:
    errors: List[str] = []
    if notify.buffer_target_per_interval < 0:
        errors.append("notify buffer target per interval must not be negative")
    if notify.buffer_interval_seconds < 0:
        errors.append("notify buffer interval must not be negative")
    errors.extend(_validate_smtp(notify.smtp, "notify"))
    return errors


def _validate_amboy(amboy: AmboyConfig) -> List[str]:
    errors: List[str] = []
    if amboy.pool_size_local < 0:
        errors.append("amboy local pool size must not be negative")
    if amboy.pool_size_remote < 0:
        errors.append("amboy remote pool size must not be negative")
    if amboy.local_storage < 0:
        errors.append("amboy local storage size must not be negative")
    return errors


def _validate_logger(logger_config: LoggerConfig) -> List[str]:
    errors: List[str] = []
    if logger_config.default_level not in VALID_LOG_LEVELS:
        errors.append(f"'{logger_config.default_level}' is not a valid default log level")
    if logger_config.threshold_level not in VALID_LOG_LEVELS:
        errors.append(f"'{logger_config.threshold_level}' is not a valid threshold log level")
    if logger_config.buffer.count < 0 or logger_config.buffer.duration_seconds < 0:
        errors.append("logger buffer settings must not be negative")
    return errors


def _validate_repotracker(repotracker: RepoTrackerConfig) -> List[str]:
    errors: List[str] = []
    if repotracker.revs_to_fetch < 0:
        errors.append("repotracker revisions to fetch must not be negative")
    if repotracker.max_revs_to_search < 0:
        errors.append("repotracker max revisions to search must not be negative")
    if repotracker.max_concurrent_requests < 0:
        errors.append("repotracker max concurrent requests must not be negative")
    return errors


def _validate_jira(jira: JiraConfig) -> List[str]:
    if jira.host and not jira.username:
        return ["Jira username must not be empty when a Jira host is configured"]
    return []


def _validate_container_pools(pools_config: ContainerPoolsConfig, find_distro: DistroLookup) -> List[str]:
    errors: List[str] = []
    seen_ids = set()
    for pool in pools_config.pools:
        if not pool.id:
            errors.append("container pool id must not be empty")
            continue
        if pool.id in seen_ids:
            errors.append(f"container pool id {pool.id} is not unique")
        seen_ids.add(pool.id)
        if pool.max_containers <= 0:
            errors.append(f"container pool {pool.id} must have a positive max containers value")

        try:
            distro = find_distro(pool.distro) if pool.distro else None
        except Exception:  # noqa: BLE001
            logger.exception("distro lookup failed for container pool %s", pool.id)
            distro = None
        if distro is None:
            errors.append(f"error finding distro for container pool {pool.id}")
            continue
        # 被池引用的 distro 自身不能再归属于某个池（禁止嵌套）
        if distro.container_pool:
            errors.append(f"container pool {pool.id} has invalid distro")
    return errors


def _dedupe(messages: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(messages))


def validate_admin_settings(candidate: AdminSettings, find_distro: DistroLookup) -> List[str]:
    errors: List[str] = []
    errors.extend(_validate_root(candidate))
    errors.extend(_validate_ui(candidate.ui))
    errors.extend(_validate_smtp(candidate.alerts.smtp, "alerts"))
    errors.extend(_validate_notify(candidate.notify))
    errors.extend(_validate_amboy(candidate.amboy))
    errors.extend(_validate_logger(candidate.logger_config))
    errors.extend(_validate_repotracker(candidate.repotracker))
    errors.extend(_validate_jira(candidate.jira))
    if candidate.scheduler.task_finder not in VALID_TASK_FINDERS:
        errors.append(f"'{candidate.scheduler.task_finder}' is not a valid task finder")
    if candidate.hostinit.ssh_timeout_secs < 0:
        errors.append("hostinit SSH timeout must not be negative")
    errors.extend(_validate_container_pools(candidate.container_pools, find_distro))
    return _dedupe(errors)
