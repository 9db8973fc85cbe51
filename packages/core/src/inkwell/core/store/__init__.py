"""Inkwell Core Store -- SQLite 持久化实现

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

from pathlib import Path

import aiosqlite

from .birthday_store import SqliteBirthdayKeywordStore
from .cache_store import SqliteCacheStore
from .pack_store import SqlitePackStore
from .sqlite_init import init_db


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.cache_store = SqliteCacheStore(conn)
        self.pack_store = SqlitePackStore(conn)
        self.birthday_store = SqliteBirthdayKeywordStore(conn)


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteCacheStore",
    "SqlitePackStore",
    "SqliteBirthdayKeywordStore",
    "init_db",
]
