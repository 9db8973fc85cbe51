"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含 SQLite 连通性、存储后端、磁盘空间；
         profile=llm 时额外探测 LiteLLM Proxy。
"""

import shutil

import structlog
from fastapi import APIRouter, Query, Request
from inkwell.core.store.sqlite_init import verify_wal_mode
from starlette.responses import JSONResponse

from ..services.persister import LocalStorageBackend

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(
    request: Request,
    profile: str | None = Query(
        default=None,
        description="检查配置文件：core（默认）仅核心检查；llm/full 包含 LiteLLM Proxy 健康检查",
    ),
):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. sqlite: 数据库连通性与 WAL 模式
    2. storage: 本地后端检查上传目录，对象存储只报告后端名
    3. disk_space_mb: 磁盘剩余空间
    4. litellm_proxy: 根据 profile 决定是否探测 Proxy
    """
    effective_profile = profile or "core"

    checks = {}
    all_ok = True

    try:
        if await verify_wal_mode(request.app.state.store_group.conn):
            checks["sqlite"] = "ok"
        else:
            # 可用但并发读写会互相阻塞
            checks["sqlite"] = "ok: journal_mode is not wal"
    except Exception as e:
        log.warning("ready_sqlite_failed", error=str(e))
        checks["sqlite"] = "unavailable"
        all_ok = False

    try:
        backend = request.app.state.persister.backend
        if isinstance(backend, LocalStorageBackend):
            if backend.uploads_dir.is_dir():
                checks["storage"] = "ok"
            else:
                checks["storage"] = "error: uploads directory does not exist"
                all_ok = False
        else:
            checks["storage"] = backend.name
    except Exception as e:
        checks["storage"] = f"error: {e}"
        all_ok = False

    try:
        disk_usage = shutil.disk_usage("/")
        checks["disk_space_mb"] = disk_usage.free // (1024 * 1024)
    except OSError:
        checks["disk_space_mb"] = 0
        all_ok = False

    if effective_profile in ("llm", "full"):
        litellm_client = getattr(request.app.state, "litellm_client", None)
        if litellm_client is not None:
            try:
                if await litellm_client.health_check():
                    checks["litellm_proxy"] = "ok"
                else:
                    checks["litellm_proxy"] = "unreachable"
                    all_ok = False
            except Exception as e:
                log.warning("health_check_error", error=str(e))
                checks["litellm_proxy"] = "unreachable"
                all_ok = False
        else:
            # 静态主题模式：无 litellm_client
            checks["litellm_proxy"] = "skipped"
    else:
        checks["litellm_proxy"] = "skipped"

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "not_ready",
            "profile": effective_profile,
            "checks": checks,
        },
    )
