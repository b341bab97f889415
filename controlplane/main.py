"""ClusterControlPlane FastAPI 入口"""
import logging
import time
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, Request, Response

from controlplane.api import admin, auth
from controlplane.core.config import settings
from controlplane.core.errors import install_exception_handlers
from controlplane.core.logger import setup_logging
from controlplane.db.sqlite import SQLiteDB
from controlplane.services.registry import build_services

logger = logging.getLogger(__name__)


def create_app(db: Optional[SQLiteDB] = None) -> FastAPI:
    """创建应用；未传入存储句柄时按进程配置打开数据库并初始化日志。"""
    if db is None:
        setup_logging()
        db = SQLiteDB(settings.db_path)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="CI fleet admin settings control plane",
    )
    app.state.db = db
    app.state.services = build_services(db)
    install_exception_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = str(request.headers.get("x-request-id") or uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        response: Response | None = None
        try:
            response = await call_next(request)
        finally:
            process_time = time.time() - start_time
            status_code = int(response.status_code) if response is not None else 500
            logger.info(
                "API访问日志 | %s | %s %s | %s | %.3fs | %s",
                request.client.host if request.client else "unknown",
                request.method,
                request.url.path,
                status_code,
                process_time,
                request_id,
            )
        response.headers["X-Request-Id"] = request_id
        return response

    app.include_router(auth.router)
    app.include_router(admin.router)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "controlplane.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
