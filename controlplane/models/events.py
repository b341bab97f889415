"""管理事件（审计记录）模型

事件负载是按 `kind` 区分的封闭联合类型：读取时依据判别字段解码，
新增负载类型需要同时扩展 `AdminEventData` 与视图转换。
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional, Union
from urllib.parse import urlencode

from pydantic import BaseModel, Field, field_validator

from controlplane.models.settings import AdminSettings

EVENT_KIND_CONFIG_CHANGE = "config_change"
EVENT_KIND_TASK_RESTART = "task_restart"


class ConfigChangeEventData(BaseModel):
    kind: Literal["config_change"] = EVENT_KIND_CONFIG_CHANGE
    before: AdminSettings
    after: AdminSettings


class TaskRestartEventData(BaseModel):
    kind: Literal["task_restart"] = EVENT_KIND_TASK_RESTART
    start_time: datetime
    end_time: datetime
    tasks_restarted: List[str] = Field(default_factory=list)
    tasks_errored: List[str] = Field(default_factory=list)


AdminEventData = Annotated[
    Union[ConfigChangeEventData, TaskRestartEventData],
    Field(discriminator="kind"),
]


class AdminEvent(BaseModel):
    guid: str
    timestamp: datetime
    user: str
    data: AdminEventData


class AdminEventView(BaseModel):
    guid: str
    kind: str
    user: str
    timestamp: str
    before: Optional[AdminSettings] = None
    after: Optional[AdminSettings] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    tasks_restarted: Optional[List[str]] = None
    tasks_errored: Optional[List[str]] = None


class Page(BaseModel):
    base_url: str = ""
    key_query_param: str = "ts"
    limit_query_param: str = "limit"
    key: str
    limit: int
    relation: str = "next"

    def url(self) -> str:
        query = urlencode({self.key_query_param: self.key, self.limit_query_param: self.limit})
        return f"{self.base_url}?{query}"


class PageLinks(BaseModel):
    next: Optional[Page] = None


class AdminEventPage(BaseModel):
    events: List[AdminEvent] = Field(default_factory=list)
    next: Optional[Page] = None


class AdminEventListResponse(BaseModel):
    events: List[AdminEventView] = Field(default_factory=list)
    pages: PageLinks = Field(default_factory=PageLinks)


class RevertRequest(BaseModel):
    guid: str = ""

    @field_validator("guid", mode="before")
    @classmethod
    def normalize_guid(cls, value: Any) -> str:
        return str(value or "").strip()


class RevertResult(BaseModel):
    guid: str
    restored: AdminSettings
    event: Optional[AdminEvent] = None
    warnings: List[str] = Field(default_factory=list)
