"""SqliteCacheStore 测试 -- 精确查询、计数器、模糊匹配、图库分页与统计"""

import pytest_asyncio
from inkwell.core.keys import make_cache_key
from inkwell.core.models import CounterName, GallerySort, SourceKind
from inkwell.core.store.cache_store import SqliteCacheStore


@pytest_asyncio.fixture
async def store(core_db) -> SqliteCacheStore:
    return SqliteCacheStore(core_db)


class TestLookup:
    """按缓存键精确查询"""

    async def test_lookup_miss(self, store: SqliteCacheStore):
        assert await store.lookup(make_cache_key("cat")) is None

    async def test_lookup_hit_normalized(self, store: SqliteCacheStore, make_entry):
        """等价主题命中同一条目"""
        entry = await store.insert(make_entry("Cat", "animals"))
        found = await store.lookup(make_cache_key("  CAT ", "animals"))
        assert found is not None
        assert found.id == entry.id
        assert found.source_kind == SourceKind.GENERATED

    async def test_lookup_category_filter(self, store: SqliteCacheStore, make_entry):
        """指定分类时只命中同分类；不指定分类时命中任意分类"""
        await store.insert(make_entry("cat", "animals"))
        assert await store.lookup(make_cache_key("cat", "fantasy")) is None
        assert await store.lookup(make_cache_key("cat")) is not None

    async def test_lookup_last_write_wins(self, store: SqliteCacheStore, make_entry):
        """同一缓存键多条记录时返回最新一条"""
        await store.insert(make_entry("cat", offset_s=0))
        newer = await store.insert(make_entry("cat", offset_s=10))
        found = await store.lookup(make_cache_key("cat"))
        assert found.id == newer.id

    async def test_lookup_same_timestamp_prefers_later_insert(
        self, store: SqliteCacheStore, make_entry
    ):
        await store.insert(make_entry("cat", offset_s=5))
        second = await store.insert(make_entry("cat", offset_s=5))
        found = await store.lookup(make_cache_key("cat"))
        assert found.id == second.id

    async def test_inactive_entries_ignored(self, store: SqliteCacheStore, make_entry):
        await store.insert(make_entry("cat", is_active=False))
        assert await store.lookup(make_cache_key("cat")) is None


class TestCounters:
    """下载 / 打印计数器"""

    async def test_increment_download(self, store: SqliteCacheStore, make_entry):
        entry = await store.insert(make_entry("cat"))
        updated = await store.increment_counter(entry.id, CounterName.DOWNLOAD)
        updated = await store.increment_counter(entry.id, CounterName.DOWNLOAD)
        assert updated.download_count == 2
        assert updated.print_count == 0

    async def test_increment_print(self, store: SqliteCacheStore, make_entry):
        entry = await store.insert(make_entry("cat"))
        updated = await store.increment_counter(entry.id, CounterName.PRINT)
        assert updated.print_count == 1
        assert updated.download_count == 0

    async def test_increment_unknown_id(self, store: SqliteCacheStore):
        assert await store.increment_counter("missing", CounterName.DOWNLOAD) is None


class TestFuzzyMatch:
    """子串模糊匹配"""

    async def test_substring_match_newest_first(self, store: SqliteCacheStore, make_entry):
        await store.insert(make_entry("sea turtle", offset_s=0))
        await store.insert(make_entry("turtle shell", offset_s=10))
        await store.insert(make_entry("dragon", offset_s=20))

        results = await store.fuzzy_match("TURTLE")
        assert [e.topic for e in results] == ["turtle shell", "sea turtle"]

    async def test_limit(self, store: SqliteCacheStore, make_entry):
        for i in range(8):
            await store.insert(make_entry(f"cat {i}", offset_s=i))
        assert len(await store.fuzzy_match("cat", limit=5)) == 5

    async def test_wildcards_are_literal(self, store: SqliteCacheStore, make_entry):
        """% 和 _ 按字面匹配"""
        await store.insert(make_entry("cat"))
        await store.insert(make_entry("100% cat"))
        results = await store.fuzzy_match("%")
        assert [e.topic for e in results] == ["100% cat"]
        assert await store.fuzzy_match("c_t") == []

    async def test_blank_substring(self, store: SqliteCacheStore, make_entry):
        await store.insert(make_entry("cat"))
        assert await store.fuzzy_match("   ") == []


class TestGallery:
    """图库分页、排序、统计"""

    async def test_pagination(self, store: SqliteCacheStore, make_entry):
        for i in range(5):
            await store.insert(make_entry(f"topic {i}", offset_s=i))

        first = await store.list_gallery(page=1, limit=2)
        assert first.total == 5
        assert first.total_pages == 3
        assert first.has_more is True
        assert [e.topic for e in first.images] == ["topic 4", "topic 3"]

        last = await store.list_gallery(page=3, limit=2)
        assert [e.topic for e in last.images] == ["topic 0"]
        assert last.has_more is False

    async def test_category_and_search_filters(self, store: SqliteCacheStore, make_entry):
        await store.insert(make_entry("lion", "animals"))
        await store.insert(make_entry("lion king", "characters"))
        await store.insert(make_entry("rocket", "vehicles"))

        page = await store.list_gallery(category="animals")
        assert [e.topic for e in page.images] == ["lion"]

        page = await store.list_gallery(search="lion")
        assert page.total == 2

    async def test_popular_sort(self, store: SqliteCacheStore, make_entry):
        quiet = await store.insert(make_entry("quiet", offset_s=10))
        busy = await store.insert(make_entry("busy", offset_s=0))
        for _ in range(3):
            await store.increment_counter(busy.id, CounterName.DOWNLOAD)

        page = await store.list_gallery(sort=GallerySort.POPULAR)
        assert [e.id for e in page.images] == [busy.id, quiet.id]
        assert (await store.list_popular(1))[0].id == busy.id
        assert (await store.list_recent(1))[0].id == quiet.id

    async def test_list_by_category(self, store: SqliteCacheStore, make_entry):
        for i in range(4):
            await store.insert(make_entry(f"animal {i}", "animals", offset_s=i))
        await store.insert(make_entry("rocket", "vehicles"))
        results = await store.list_by_category("animals", limit=3)
        assert [e.topic for e in results] == ["animal 3", "animal 2", "animal 1"]

    async def test_stats(self, store: SqliteCacheStore, make_entry):
        a = await store.insert(make_entry("lion", "animals"))
        await store.insert(make_entry("tiger", "animals"))
        await store.insert(make_entry("rocket", "vehicles"))
        await store.insert(make_entry("mystery"))
        await store.increment_counter(a.id, CounterName.DOWNLOAD)

        stats = await store.stats()
        assert stats.total_images == 4
        assert stats.total_downloads == 1
        assert {c.category: c.count for c in stats.by_category} == {
            "animals": 2,
            "vehicles": 1,
        }

    async def test_stats_empty(self, store: SqliteCacheStore):
        stats = await store.stats()
        assert stats.total_images == 0
        assert stats.total_downloads == 0
        assert stats.by_category == []
