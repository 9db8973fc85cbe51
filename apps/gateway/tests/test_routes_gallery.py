"""图库路由测试 -- 分页、排序、检索、详情、计数器"""

from datetime import UTC, datetime, timedelta

import pytest_asyncio
from httpx import AsyncClient
from inkwell.core.keys import normalize_topic
from inkwell.core.models import CacheEntry, SourceKind

_BASE = datetime(2026, 3, 1, tzinfo=UTC)


def _entry(entry_id: str, topic: str, category: str | None, offset_s: int) -> CacheEntry:
    return CacheEntry(
        id=entry_id,
        topic=topic,
        topic_normalized=normalize_topic(topic),
        category=category,
        artifact_ref=f"/data/uploads/{entry_id}.png",
        artifact_url=f"/uploads/{entry_id}.png",
        source_kind=SourceKind.GENERATED,
        created_at=_BASE + timedelta(seconds=offset_s),
    )


@pytest_asyncio.fixture
async def seeded(store_group):
    entries = [
        _entry("img-lion", "Lion", "animals", 0),
        _entry("img-tiger", "Tiger", "animals", 1),
        _entry("img-sea-lion", "Sea Lion", "animals", 2),
        _entry("img-rocket", "Rocket", "vehicles", 3),
    ]
    for entry in entries:
        await store_group.cache_store.insert(entry)
    return entries


class TestGalleryList:
    async def test_paginated(self, client: AsyncClient, seeded):
        resp = await client.get("/api/gallery", params={"page": 1, "limit": 3})
        assert resp.status_code == 200
        data = resp.json()
        assert data["total"] == 4
        assert data["total_pages"] == 2
        assert data["has_more"] is True
        ids = [img["id"] for img in data["images"]]
        assert ids == ["img-rocket", "img-sea-lion", "img-tiger"]

    async def test_filters(self, client: AsyncClient, seeded):
        resp = await client.get("/api/gallery", params={"category": "vehicles"})
        assert [img["id"] for img in resp.json()["images"]] == ["img-rocket"]

        resp = await client.get("/api/gallery", params={"search": "lion"})
        assert resp.json()["total"] == 2

    async def test_invalid_page(self, client: AsyncClient):
        resp = await client.get("/api/gallery", params={"page": 0})
        assert resp.status_code == 422

    async def test_popular_after_downloads(self, client: AsyncClient, seeded):
        await client.post("/api/gallery/img-lion/download")
        resp = await client.get("/api/gallery/popular", params={"limit": 1})
        assert resp.json()["images"][0]["id"] == "img-lion"

        resp = await client.get("/api/gallery", params={"sort": "popular", "limit": 1})
        assert resp.json()["images"][0]["id"] == "img-lion"

    async def test_recent(self, client: AsyncClient, seeded):
        resp = await client.get("/api/gallery/recent", params={"limit": 2})
        assert [img["id"] for img in resp.json()["images"]] == ["img-rocket", "img-sea-lion"]

    async def test_stats(self, client: AsyncClient, seeded):
        data = (await client.get("/api/gallery/stats")).json()
        assert data["total_images"] == 4
        assert {"category": "animals", "count": 3} in data["by_category"]


class TestGallerySearch:
    async def test_exact_match(self, client: AsyncClient, seeded):
        data = (await client.get("/api/gallery/search", params={"topic": "  LION "})).json()
        assert data["match"] == "exact"
        assert [img["id"] for img in data["images"]] == ["img-lion"]

    async def test_fuzzy_match(self, client: AsyncClient, seeded):
        data = (await client.get("/api/gallery/search", params={"topic": "ion"})).json()
        assert data["match"] == "fuzzy"
        assert [img["id"] for img in data["images"]] == ["img-sea-lion", "img-lion"]

    async def test_no_match(self, client: AsyncClient, seeded):
        data = (await client.get("/api/gallery/search", params={"topic": "unicorn"})).json()
        assert data == {"match": "none", "images": []}

    async def test_blank_topic(self, client: AsyncClient):
        resp = await client.get("/api/gallery/search", params={"topic": "   "})
        assert resp.status_code == 400


class TestGalleryDetail:
    async def test_detail_with_related(self, client: AsyncClient, seeded):
        data = (await client.get("/api/gallery/img-lion")).json()
        assert data["image"]["topic"] == "Lion"
        related = [img["id"] for img in data["related"]]
        assert "img-lion" not in related
        assert set(related) == {"img-tiger", "img-sea-lion"}

    async def test_unknown_id(self, client: AsyncClient):
        resp = await client.get("/api/gallery/missing")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "IMAGE_NOT_FOUND"


class TestCounters:
    async def test_download_and_print(self, client: AsyncClient, seeded):
        resp = await client.post("/api/gallery/img-tiger/download")
        assert resp.json() == {"id": "img-tiger", "download_count": 1}
        resp = await client.post("/api/gallery/img-tiger/print")
        assert resp.json() == {"id": "img-tiger", "print_count": 1}

        data = (await client.get("/api/gallery/img-tiger")).json()
        assert data["image"]["download_count"] == 1
        assert data["image"]["print_count"] == 1

    async def test_unknown_id(self, client: AsyncClient):
        assert (await client.post("/api/gallery/missing/download")).status_code == 404
        assert (await client.post("/api/gallery/missing/print")).status_code == 404
