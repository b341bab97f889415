"""Distro（节点组）模型"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, field_validator


class Distro(BaseModel):
    id: str
    arch: str = ""
    provider: str = ""
    container_pool: Optional[str] = None

    @field_validator("container_pool")
    @classmethod
    def normalize_container_pool(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None
