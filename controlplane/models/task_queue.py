"""分发队列模型"""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class TaskQueueItem(BaseModel):
    id: str
    display_name: str = ""
    build_variant: str = ""
    project: str = ""
    version: str = ""
    requester: str = ""
    revision: str = ""
    revision_order_number: int = 0
    priority: int = 0
    expected_duration_ms: int = 0
    group: str = ""
    group_max_hosts: int = 0
    is_group: bool = False
    dependencies: List[str] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("task queue item id cannot be empty")
        return text


class TaskQueue(BaseModel):
    distro: str
    queue: List[TaskQueueItem] = Field(default_factory=list)
    generated_at: Optional[str] = None


class TaskQueueClearResponse(BaseModel):
    distro: str
    cleared: int


class TaskQueueLengthsResponse(BaseModel):
    lengths: Dict[str, int] = Field(default_factory=dict)
