"""全局 pytest 配置 -- 临时 SQLite 数据库 + 测试图片 fixture"""

import io
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from PIL import Image


def make_png(width: int = 32, height: int = 32, color: str = "white") -> bytes:
    """渲染一张纯色 PNG"""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> Callable[..., bytes]:
    """返回 PNG 构造函数，可指定尺寸"""
    return make_png


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "test.db"


@pytest_asyncio.fixture
async def tmp_uploads_dir(tmp_path: Path) -> Path:
    """提供临时上传目录"""
    uploads_dir = tmp_path / "uploads"
    uploads_dir.mkdir(parents=True, exist_ok=True)
    return uploads_dir


@pytest_asyncio.fixture
async def db_conn(tmp_db_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接"""
    from inkwell.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_db_path))
    await init_db(conn)
    yield conn
    await conn.close()
