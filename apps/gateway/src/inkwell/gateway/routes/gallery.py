"""图库路由

GET  /api/gallery              分页列表（category / sort / search）
GET  /api/gallery/popular      下载最多
GET  /api/gallery/recent       最新
GET  /api/gallery/stats        统计
GET  /api/gallery/search       精确匹配优先，其次模糊匹配
GET  /api/gallery/{id}         单条 + 同分类相关图片
POST /api/gallery/{id}/download, /print  计数器 +1
"""

from fastapi import APIRouter, Depends, Query
from inkwell.core.keys import make_cache_key, normalize_topic
from inkwell.core.models import CounterName, GallerySort
from inkwell.core.store import StoreGroup

from ..deps import get_store_group
from .errors import error_response

router = APIRouter(prefix="/api/gallery")

FUZZY_LIMIT = 5
RELATED_LIMIT = 6


@router.get("")
async def list_gallery(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=24, ge=1, le=100),
    category: str | None = Query(default=None),
    sort: GallerySort = Query(default=GallerySort.NEWEST),
    search: str | None = Query(default=None),
    store_group: StoreGroup = Depends(get_store_group),
):
    """分页查询图库"""
    return await store_group.cache_store.list_gallery(
        page=page,
        limit=limit,
        category=category,
        sort=sort,
        search=search,
    )


@router.get("/popular")
async def popular(
    limit: int = Query(default=12, ge=1, le=100),
    store_group: StoreGroup = Depends(get_store_group),
):
    return {"images": await store_group.cache_store.list_popular(limit)}


@router.get("/recent")
async def recent(
    limit: int = Query(default=12, ge=1, le=100),
    store_group: StoreGroup = Depends(get_store_group),
):
    return {"images": await store_group.cache_store.list_recent(limit)}


@router.get("/stats")
async def stats(store_group: StoreGroup = Depends(get_store_group)):
    return await store_group.cache_store.stats()


@router.get("/search")
async def search(
    topic: str = Query(min_length=1, max_length=100),
    category: str | None = Query(default=None),
    store_group: StoreGroup = Depends(get_store_group),
):
    """精确匹配命中时返回单条，否则返回模糊匹配列表"""
    if not normalize_topic(topic):
        return error_response(400, "INVALID_INPUT", "topic 不能为空")

    exact = await store_group.cache_store.lookup(make_cache_key(topic, category))
    if exact is not None:
        return {"match": "exact", "images": [exact]}

    fuzzy = await store_group.cache_store.fuzzy_match(topic, limit=FUZZY_LIMIT)
    return {"match": "fuzzy" if fuzzy else "none", "images": fuzzy}


@router.get("/{entry_id}")
async def get_image(entry_id: str, store_group: StoreGroup = Depends(get_store_group)):
    """单条图片 + 同分类相关图片"""
    entry = await store_group.cache_store.get(entry_id)
    if entry is None:
        return _not_found(entry_id)

    related = []
    if entry.category:
        related = [
            e
            for e in await store_group.cache_store.list_by_category(
                entry.category, RELATED_LIMIT + 1
            )
            if e.id != entry.id
        ][:RELATED_LIMIT]
    return {"image": entry, "related": related}


@router.post("/{entry_id}/download")
async def record_download(entry_id: str, store_group: StoreGroup = Depends(get_store_group)):
    entry = await store_group.cache_store.increment_counter(entry_id, CounterName.DOWNLOAD)
    if entry is None:
        return _not_found(entry_id)
    return {"id": entry.id, "download_count": entry.download_count}


@router.post("/{entry_id}/print")
async def record_print(entry_id: str, store_group: StoreGroup = Depends(get_store_group)):
    entry = await store_group.cache_store.increment_counter(entry_id, CounterName.PRINT)
    if entry is None:
        return _not_found(entry_id)
    return {"id": entry.id, "print_count": entry.print_count}


def _not_found(entry_id: str):
    return error_response(404, "IMAGE_NOT_FOUND", f"Image with id {entry_id} does not exist")
