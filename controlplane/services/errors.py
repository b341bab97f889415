"""控制面服务异常类型（轻量模块，避免引入重依赖）。"""
from __future__ import annotations

from typing import Iterable, List


class ControlPlaneError(Exception):
    """控制面通用异常"""


class SettingsValidationError(ControlPlaneError):
    """配置校验失败，messages 保留全部问题"""

    def __init__(self, messages: Iterable[str]):
        self.messages: List[str] = [str(item) for item in messages]
        super().__init__(", ".join(self.messages))


class NotFoundError(ControlPlaneError):
    """目标记录不存在"""


class InvalidArgumentError(ControlPlaneError):
    """请求参数不合法，在访问存储之前拒绝"""


class StorageUnavailableError(ControlPlaneError):
    """存储不可用，调用方可退避重试"""
