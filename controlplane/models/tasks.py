"""任务重启模型"""
from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class RestartTasksRequest(BaseModel):
    start_time: datetime
    end_time: datetime
    dry_run: bool = False


class RestartTasksResponse(BaseModel):
    tasks_restarted: List[str] = Field(default_factory=list)
    tasks_errored: List[str] = Field(default_factory=list)
