"""集成测试共享 fixture -- 真实 lifespan，echo 模式"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sse_starlette.sse import AppStatus

_STORAGE_VARS = (
    "INKWELL_S3_ENDPOINT",
    "R2_ACCOUNT_ID",
    "R2_ACCESS_KEY_ID",
    "R2_SECRET_ACCESS_KEY",
    "R2_BUCKET_NAME",
    "R2_PUBLIC_URL",
)


@pytest.fixture(autouse=True)
def reset_sse_app_status():
    AppStatus.should_exit_event = None


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path, monkeypatch):
    """集成测试用 FastAPI app，lifespan 完整执行"""
    monkeypatch.setenv("INKWELL_DB_PATH", str(tmp_path / "sqlite" / "test.db"))
    monkeypatch.setenv("INKWELL_UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("INKWELL_GENERATION_MODE", "echo")
    monkeypatch.setenv("INKWELL_KEYWORD_MODE", "static")
    monkeypatch.setenv("INKWELL_RATE_LIMIT_MAX", "2")
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")
    for var in _STORAGE_VARS:
        monkeypatch.delenv(var, raising=False)

    from inkwell.gateway.main import create_app, lifespan

    app = create_app()
    async with lifespan(app):
        yield app


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
