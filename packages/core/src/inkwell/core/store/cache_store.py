"""CacheStore SQLite 实现

images 表不对缓存键做唯一约束：并发重复写入都会落库，
lookup 按 created_at 取最新一条（last-write-wins）。
"""

import math
from datetime import datetime

import aiosqlite

from ..keys import normalize_topic
from ..models import (
    CacheEntry,
    CacheKey,
    CategoryCount,
    CounterName,
    GalleryPage,
    GallerySort,
    GalleryStats,
)

_COLUMNS = (
    "id",
    "topic",
    "topic_normalized",
    "category",
    "prompt",
    "artifact_ref",
    "artifact_url",
    "mime_type",
    "file_size",
    "width",
    "height",
    "download_count",
    "print_count",
    "source_kind",
    "provider",
    "created_at",
    "is_active",
)

_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM images"

# 同一时间戳下按插入顺序倒序，保证最新写入优先
_ORDER_NEWEST = "ORDER BY created_at DESC, rowid DESC"
_ORDER_POPULAR = "ORDER BY download_count DESC, created_at DESC, rowid DESC"


def _escape_like(value: str) -> str:
    """转义 LIKE 通配符"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqliteCacheStore:
    """CacheStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def lookup(self, key: CacheKey) -> CacheEntry | None:
        """按缓存键查询最新一条有效记录

        key.category 为 None 时不按分类过滤。
        """
        query = f"{_SELECT} WHERE topic_normalized = ? AND is_active = 1"
        params: list = [key.topic_normalized]
        if key.category:
            query += " AND category = ?"
            params.append(key.category)
        query += f" {_ORDER_NEWEST} LIMIT 1"

        cursor = await self._conn.execute(query, params)
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_entry(row)

    async def insert(self, entry: CacheEntry) -> CacheEntry:
        """写入新条目并提交"""
        await self._conn.execute(
            f"""
            INSERT INTO images ({', '.join(_COLUMNS)})
            VALUES ({', '.join('?' for _ in _COLUMNS)})
            """,
            (
                entry.id,
                entry.topic,
                entry.topic_normalized,
                entry.category,
                entry.prompt,
                entry.artifact_ref,
                entry.artifact_url,
                entry.mime_type,
                entry.file_size,
                entry.width,
                entry.height,
                entry.download_count,
                entry.print_count,
                entry.source_kind.value,
                entry.provider,
                entry.created_at.isoformat(),
                1 if entry.is_active else 0,
            ),
        )
        await self._conn.commit()
        return entry

    async def get(self, entry_id: str) -> CacheEntry | None:
        """按 id 查询有效记录"""
        cursor = await self._conn.execute(
            f"{_SELECT} WHERE id = ? AND is_active = 1",
            (entry_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_entry(row)

    async def increment_counter(
        self,
        entry_id: str,
        counter: CounterName,
    ) -> CacheEntry | None:
        """计数器 +1，条目不存在返回 None

        列名只来自 CounterName 枚举，不拼接外部输入。
        """
        column = CounterName(counter).value
        await self._conn.execute(
            f"UPDATE images SET {column} = {column} + 1 WHERE id = ? AND is_active = 1",
            (entry_id,),
        )
        await self._conn.commit()
        return await self.get(entry_id)

    async def fuzzy_match(self, substring: str, limit: int = 5) -> list[CacheEntry]:
        """归一化主题子串匹配，按创建时间倒序"""
        normalized = normalize_topic(substring)
        if not normalized:
            return []
        cursor = await self._conn.execute(
            f"""
            {_SELECT}
            WHERE topic_normalized LIKE ? ESCAPE '\\' AND is_active = 1
            {_ORDER_NEWEST}
            LIMIT ?
            """,
            (f"%{_escape_like(normalized)}%", limit),
        )
        rows = await cursor.fetchall()
        return [self._row_to_entry(row) for row in rows]

    async def list_gallery(
        self,
        page: int = 1,
        limit: int = 24,
        category: str | None = None,
        sort: GallerySort = GallerySort.NEWEST,
        search: str | None = None,
    ) -> GalleryPage:
        """分页查询图库，附带总数与是否还有下一页"""
        page = max(page, 1)
        where = "WHERE is_active = 1"
        params: list = []
        if category:
            where += " AND category = ?"
            params.append(category)
        if search and (normalized := normalize_topic(search)):
            where += " AND topic_normalized LIKE ? ESCAPE '\\'"
            params.append(f"%{_escape_like(normalized)}%")

        order = _ORDER_POPULAR if sort == GallerySort.POPULAR else _ORDER_NEWEST
        cursor = await self._conn.execute(
            f"{_SELECT} {where} {order} LIMIT ? OFFSET ?",
            (*params, limit, (page - 1) * limit),
        )
        rows = await cursor.fetchall()

        cursor = await self._conn.execute(f"SELECT COUNT(*) FROM images {where}", params)
        total = (await cursor.fetchone())[0]

        return GalleryPage(
            images=[self._row_to_entry(row) for row in rows],
            total=total,
            page=page,
            total_pages=math.ceil(total / limit) if limit else 0,
            has_more=page * limit < total,
        )

    async def list_popular(self, limit: int = 12) -> list[CacheEntry]:
        """下载最多的图片"""
        cursor = await self._conn.execute(
            f"{_SELECT} WHERE is_active = 1 {_ORDER_POPULAR} LIMIT ?",
            (limit,),
        )
        return [self._row_to_entry(row) for row in await cursor.fetchall()]

    async def list_recent(self, limit: int = 12) -> list[CacheEntry]:
        """最新图片"""
        cursor = await self._conn.execute(
            f"{_SELECT} WHERE is_active = 1 {_ORDER_NEWEST} LIMIT ?",
            (limit,),
        )
        return [self._row_to_entry(row) for row in await cursor.fetchall()]

    async def list_by_category(self, category: str, limit: int = 6) -> list[CacheEntry]:
        """同分类的最新图片"""
        cursor = await self._conn.execute(
            f"{_SELECT} WHERE category = ? AND is_active = 1 {_ORDER_NEWEST} LIMIT ?",
            (category, limit),
        )
        return [self._row_to_entry(row) for row in await cursor.fetchall()]

    async def stats(self) -> GalleryStats:
        """图库统计：总数、总下载量、各分类数量"""
        cursor = await self._conn.execute(
            "SELECT COUNT(*), COALESCE(SUM(download_count), 0) FROM images WHERE is_active = 1"
        )
        total, downloads = await cursor.fetchone()

        cursor = await self._conn.execute(
            """
            SELECT category, COUNT(*) FROM images
            WHERE is_active = 1 AND category IS NOT NULL
            GROUP BY category
            ORDER BY category
            """
        )
        by_category = [
            CategoryCount(category=row[0], count=row[1]) for row in await cursor.fetchall()
        ]
        return GalleryStats(
            total_images=total,
            total_downloads=downloads,
            by_category=by_category,
        )

    @staticmethod
    def _row_to_entry(row) -> CacheEntry:
        """将数据库行转换为 CacheEntry 模型"""
        data = dict(zip(_COLUMNS, row, strict=True))
        data["created_at"] = datetime.fromisoformat(data["created_at"])
        data["is_active"] = bool(data["is_active"])
        return CacheEntry(**data)
