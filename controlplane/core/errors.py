"""全局异常处理器与统一错误响应结构"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from controlplane.services.errors import (
    InvalidArgumentError,
    NotFoundError,
    SettingsValidationError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)

STORAGE_RETRY_AFTER_SECONDS = "5"


def build_error_response(
    status_code: int,
    detail: str,
    *,
    error_type: str,
    code: Optional[int] = None,
    meta: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    payload: Dict[str, Any] = {
        "detail": str(detail or ""),
        "error": {
            "type": str(error_type or "unknown_error"),
        },
    }
    if code is not None:
        payload["error"]["code"] = int(code)
    if meta:
        payload["error"]["meta"] = jsonable_encoder(meta)
    return JSONResponse(status_code=int(status_code), content=payload, headers=headers)


def _log_request_error(request: Request, error_type: str, detail: str, status_code: int) -> None:
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request failed | %s %s | %s | %s | %s",
        request.method,
        request.url.path,
        status_code,
        error_type,
        detail,
    )


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SettingsValidationError)
    async def _handle_settings_validation(request: Request, exc: SettingsValidationError):
        detail = ", ".join(exc.messages)
        _log_request_error(request, "settings_validation_error", detail, 400)
        return build_error_response(
            400,
            detail,
            error_type="settings_validation_error",
            meta={"errors": exc.messages},
        )

    @app.exception_handler(NotFoundError)
    async def _handle_not_found(request: Request, exc: NotFoundError):
        _log_request_error(request, "not_found", str(exc), 404)
        return build_error_response(404, str(exc), error_type="not_found")

    @app.exception_handler(InvalidArgumentError)
    async def _handle_invalid_argument(request: Request, exc: InvalidArgumentError):
        _log_request_error(request, "invalid_argument", str(exc), 400)
        return build_error_response(400, str(exc), error_type="invalid_argument")

    @app.exception_handler(StorageUnavailableError)
    async def _handle_storage_unavailable(request: Request, exc: StorageUnavailableError):
        _log_request_error(request, "storage_unavailable", str(exc), 503)
        return build_error_response(
            503,
            "storage is unavailable, retry later",
            error_type="storage_unavailable",
            headers={"Retry-After": STORAGE_RETRY_AFTER_SECONDS},
        )

    @app.exception_handler(sqlite3.OperationalError)
    async def _handle_sqlite_operational(request: Request, exc: sqlite3.OperationalError):
        # database is locked / disk I/O 等瞬时故障
        _log_request_error(request, "storage_unavailable", str(exc), 503)
        return build_error_response(
            503,
            "storage is unavailable, retry later",
            error_type="storage_unavailable",
            headers={"Retry-After": STORAGE_RETRY_AFTER_SECONDS},
        )

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation(request: Request, exc: RequestValidationError):
        encoded_errors = jsonable_encoder(exc.errors())
        _log_request_error(request, "validation_error", "request validation failed", 422)
        return build_error_response(
            422,
            "request validation failed",
            error_type="validation_error",
            meta={"errors": encoded_errors},
        )

    @app.exception_handler(HTTPException)
    async def _handle_http_exception(request: Request, exc: HTTPException):
        raw_detail = exc.detail
        if isinstance(raw_detail, str):
            detail = raw_detail
            meta = {"status_code": int(exc.status_code)}
        else:
            detail = "request failed"
            meta = {"status_code": int(exc.status_code), "raw_detail": raw_detail}
        _log_request_error(request, "http_error", detail, int(exc.status_code))
        return build_error_response(
            int(exc.status_code),
            detail,
            error_type="http_error",
            meta=meta,
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception):  # noqa: ARG001
        logger.exception("Unhandled error: %s %s", request.method, request.url.path)
        return build_error_response(
            500,
            "internal server error",
            error_type="internal_error",
        )
