"""BirthdayKeywordStore SQLite 实现 -- 生日包主题缓存"""

import json
from datetime import UTC, datetime

import aiosqlite

# age 未提供时的存储值
_NO_AGE = 0


class SqliteBirthdayKeywordStore:
    """按 (theme_id, age) 缓存生日包主题列表"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def get(self, theme_id: str, age: int | None) -> list[str] | None:
        """查询缓存的主题列表，未命中返回 None"""
        cursor = await self._conn.execute(
            "SELECT keywords FROM birthday_keywords WHERE theme_id = ? AND age = ?",
            (theme_id, age or _NO_AGE),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    async def put(self, theme_id: str, age: int | None, topics: list[str]) -> None:
        """写入或覆盖主题列表"""
        await self._conn.execute(
            """
            INSERT INTO birthday_keywords (theme_id, age, keywords, created_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (theme_id, age) DO UPDATE SET
                keywords = excluded.keywords,
                created_at = excluded.created_at
            """,
            (
                theme_id,
                age or _NO_AGE,
                json.dumps(topics, ensure_ascii=False),
                datetime.now(UTC).isoformat(),
            ),
        )
        await self._conn.commit()
