"""Store Protocol 接口定义

定义 CacheStore、PackStore、BirthdayKeywordStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from typing import Protocol

from ..models import (
    CacheEntry,
    CacheKey,
    CounterName,
    GalleryPage,
    GallerySort,
    GalleryStats,
    PackImage,
)


class CacheStore(Protocol):
    """缓存存储接口

    条目只通过 insert 与计数器递增修改。
    """

    async def lookup(self, key: CacheKey) -> CacheEntry | None:
        """按缓存键查询最新一条有效记录"""
        ...

    async def insert(self, entry: CacheEntry) -> CacheEntry:
        """写入新条目并返回存储后的记录"""
        ...

    async def increment_counter(
        self,
        entry_id: str,
        counter: CounterName,
    ) -> CacheEntry | None:
        """计数器 +1，条目不存在返回 None"""
        ...

    async def fuzzy_match(self, substring: str, limit: int = 5) -> list[CacheEntry]:
        """归一化主题子串匹配，按创建时间倒序"""
        ...

    async def get(self, entry_id: str) -> CacheEntry | None:
        """按 id 查询"""
        ...

    async def list_gallery(
        self,
        page: int = 1,
        limit: int = 24,
        category: str | None = None,
        sort: GallerySort = GallerySort.NEWEST,
        search: str | None = None,
    ) -> GalleryPage:
        """分页查询图库"""
        ...

    async def stats(self) -> GalleryStats:
        """图库统计"""
        ...


class PackStore(Protocol):
    """图片包单页存储接口"""

    async def insert(self, image: PackImage) -> None:
        """写入单页"""
        ...

    async def list_for_pack(self, pack_id: str) -> list[PackImage]:
        """按 position 升序查询包内所有单页"""
        ...

    async def count_for_pack(self, pack_id: str) -> int:
        """包内已存储页数"""
        ...

    async def counts_by_pack(self) -> dict[str, int]:
        """所有包的已存储页数"""
        ...


class BirthdayKeywordStore(Protocol):
    """生日包主题缓存接口，键为 (theme_id, age)"""

    async def get(self, theme_id: str, age: int | None) -> list[str] | None:
        """未命中返回 None"""
        ...

    async def put(self, theme_id: str, age: int | None, topics: list[str]) -> None:
        """写入或覆盖"""
        ...
