"""后台管理接口"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from controlplane.core.auth import get_current_active_user
from controlplane.core.config import settings
from controlplane.db.sqlite.connection import parse_timestamp
from controlplane.models.events import AdminEventListResponse, PageLinks, RevertRequest
from controlplane.models.settings import AdminSettings, AdminSettingsEnvelope
from controlplane.models.task_queue import TaskQueue, TaskQueueClearResponse, TaskQueueLengthsResponse
from controlplane.models.tasks import RestartTasksRequest, RestartTasksResponse
from controlplane.services.errors import InvalidArgumentError
from controlplane.services.event_paginator import to_event_view
from controlplane.services.registry import ControlPlaneServices

router = APIRouter(prefix="/admin", tags=["admin"])

WARNINGS_HEADER = "X-Warnings"


def get_services(request: Request) -> ControlPlaneServices:
    return request.app.state.services


def _username(current_user: dict) -> str:
    return str(current_user.get("username") or "")


@router.get("/settings", response_model=AdminSettingsEnvelope)
async def get_admin_settings(
    current_user: dict = Depends(get_current_active_user),
    services: ControlPlaneServices = Depends(get_services),
):
    del current_user
    return services.admin_settings.get_envelope()


@router.post("/settings", response_model=AdminSettingsEnvelope)
async def post_admin_settings(
    payload: AdminSettings,
    current_user: dict = Depends(get_current_active_user),
    services: ControlPlaneServices = Depends(get_services),
):
    return await services.admin_settings.update(payload, _username(current_user))


@router.post("/revert")
async def revert_admin_settings(
    payload: RevertRequest,
    response: Response,
    current_user: dict = Depends(get_current_active_user),
    services: ControlPlaneServices = Depends(get_services),
):
    if not payload.guid:
        raise InvalidArgumentError("must specify a guid to revert")
    result = await services.revert_engine.revert(payload.guid, _username(current_user))
    if result.warnings:
        response.headers[WARNINGS_HEADER] = "; ".join(result.warnings)
    return {}


@router.get("/events", response_model=AdminEventListResponse)
async def list_admin_events(
    response: Response,
    limit: int = Query(settings.events_default_limit, ge=1, le=settings.events_max_limit, description="返回条数"),
    ts: Optional[str] = Query(None, description="游标（RFC3339），仅返回早于该时间的记录"),
    current_user: dict = Depends(get_current_active_user),
    services: ControlPlaneServices = Depends(get_services),
):
    del current_user
    cursor = None
    if ts:
        try:
            cursor = parse_timestamp(ts)
        except ValueError as exc:
            raise InvalidArgumentError(f"'{ts}' is not a valid RFC3339 timestamp") from exc

    page = services.paginator.list_events(cursor, limit)
    if page.next is not None:
        response.headers["Link"] = f'<{page.next.url()}>; rel="{page.next.relation}"'
    return AdminEventListResponse(
        events=[to_event_view(event) for event in page.events],
        pages=PageLinks(next=page.next),
    )


@router.post("/restart", response_model=RestartTasksResponse)
async def restart_tasks(
    payload: RestartTasksRequest,
    current_user: dict = Depends(get_current_active_user),
    services: ControlPlaneServices = Depends(get_services),
):
    return services.task_restart.restart(
        payload.start_time,
        payload.end_time,
        dry_run=payload.dry_run,
        user=_username(current_user),
    )


@router.get("/task_queue/lengths", response_model=TaskQueueLengthsResponse)
async def get_task_queue_lengths(
    current_user: dict = Depends(get_current_active_user),
    services: ControlPlaneServices = Depends(get_services),
):
    del current_user
    return TaskQueueLengthsResponse(lengths=services.task_queues.lengths())


@router.get("/task_queue", response_model=TaskQueue)
async def get_task_queue(
    distro: str = Query(..., min_length=1, description="distro id"),
    current_user: dict = Depends(get_current_active_user),
    services: ControlPlaneServices = Depends(get_services),
):
    del current_user
    return services.task_queues.load(distro)


@router.delete("/task_queue", response_model=TaskQueueClearResponse)
async def clear_task_queue(
    distro: str = Query(..., min_length=1, description="distro id"),
    current_user: dict = Depends(get_current_active_user),
    services: ControlPlaneServices = Depends(get_services),
):
    del current_user
    cleared = services.task_queues.clear(distro)
    return TaskQueueClearResponse(distro=distro.strip(), cleared=cleared)
