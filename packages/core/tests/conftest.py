"""packages/core 测试配置 -- 核心层 fixture"""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from inkwell.core.keys import normalize_topic
from inkwell.core.models import CacheEntry, PackImage, SourceKind
from ulid import ULID


@pytest_asyncio.fixture
async def core_db_path(tmp_path: Path) -> Path:
    """核心层临时数据库路径"""
    return tmp_path / "core_test.db"


@pytest_asyncio.fixture
async def core_db(core_db_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """核心层已初始化数据库连接"""
    from inkwell.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(core_db_path))
    await init_db(conn)
    yield conn
    await conn.close()


_BASE_TIME = datetime(2026, 1, 1, tzinfo=UTC)


@pytest.fixture
def make_entry() -> Callable[..., CacheEntry]:
    """构造 CacheEntry，offset_s 控制 created_at 先后"""

    def _make(
        topic: str = "Cat",
        category: str | None = None,
        offset_s: int = 0,
        **overrides,
    ) -> CacheEntry:
        entry_id = str(ULID())
        fields = {
            "id": entry_id,
            "topic": topic,
            "topic_normalized": normalize_topic(topic),
            "category": category,
            "prompt": f"coloring page of {topic}",
            "artifact_ref": f"/tmp/{entry_id}.png",
            "artifact_url": f"/uploads/{entry_id}.png",
            "file_size": 128,
            "source_kind": SourceKind.GENERATED,
            "provider": "pollinations",
            "created_at": _BASE_TIME + timedelta(seconds=offset_s),
        }
        fields.update(overrides)
        return CacheEntry(**fields)

    return _make


@pytest.fixture
def make_pack_image() -> Callable[..., PackImage]:
    """构造 PackImage"""

    def _make(pack_id: str = "ocean-adventure", position: int = 0, **overrides) -> PackImage:
        image_id = str(ULID())
        fields = {
            "id": image_id,
            "pack_id": pack_id,
            "topic": f"topic {position}",
            "artifact_ref": f"/tmp/{image_id}.png",
            "artifact_url": f"/uploads/{image_id}.png",
            "position": position,
            "category": "animals",
            "age_range": "5-8",
            "created_at": _BASE_TIME + timedelta(seconds=position),
        }
        fields.update(overrides)
        return PackImage(**fields)

    return _make
