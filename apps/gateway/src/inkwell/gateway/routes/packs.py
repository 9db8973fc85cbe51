"""图片包路由

GET /api/packs                         全部图片包 + 已缓存页数
GET /api/packs/{pack_id}               单个图片包
GET /api/packs/{pack_id}/images        已生成的单页（按位置排序）
GET /api/packs/{pack_id}/generate-stream  SSE 流式生成
"""

import json

from fastapi import APIRouter, Depends, Request
from inkwell.core.catalog import PACKS, get_pack
from inkwell.core.config import SSE_PING_INTERVAL
from inkwell.core.models import PackEvent
from inkwell.core.store import StoreGroup
from sse_starlette.sse import EventSourceResponse

from ..deps import get_pack_generator, get_store_group
from ..services.pack_service import PackGenerator
from .errors import error_response

router = APIRouter(prefix="/api/packs")


def event_to_sse(event: PackEvent) -> dict:
    """将 PackEvent 转换为 sse_starlette 消息"""
    return {
        "event": event.type.value,
        "data": json.dumps(event.data, ensure_ascii=False),
    }


def _not_found(pack_id: str):
    return error_response(404, "PACK_NOT_FOUND", f"Pack with id {pack_id} does not exist")


@router.get("")
async def list_packs(
    request: Request,
    store_group: StoreGroup = Depends(get_store_group),
):
    counts = await store_group.pack_store.counts_by_pack()
    size = request.app.state.pack_generator.size
    return {
        "packs": [
            {
                **pack.model_dump(mode="json"),
                "cached_count": counts.get(pack.id, 0),
                "is_ready": counts.get(pack.id, 0) >= size,
            }
            for pack in PACKS
        ]
    }


@router.get("/{pack_id}")
async def get_pack_detail(
    pack_id: str,
    store_group: StoreGroup = Depends(get_store_group),
):
    pack = get_pack(pack_id)
    if pack is None:
        return _not_found(pack_id)
    count = await store_group.pack_store.count_for_pack(pack_id)
    return {"pack": pack, "cached_count": count}


@router.get("/{pack_id}/images")
async def list_pack_images(
    pack_id: str,
    store_group: StoreGroup = Depends(get_store_group),
):
    pack = get_pack(pack_id)
    if pack is None:
        return _not_found(pack_id)
    images = await store_group.pack_store.list_for_pack(pack_id)
    return {"pack_id": pack_id, "count": len(images), "images": images}


@router.get("/{pack_id}/generate-stream")
async def generate_pack_stream(
    pack_id: str,
    request: Request,
    generator: PackGenerator = Depends(get_pack_generator),
):
    """SSE 流式生成图片包

    客户端断开后不再启动新的主题，正在进行的主题继续完成并落库。
    """
    pack = get_pack(pack_id)
    if pack is None:
        return _not_found(pack_id)

    async def event_generator():
        async for event in generator.stream_pack(pack, request.is_disconnected):
            yield event_to_sse(event)

    return EventSourceResponse(event_generator(), ping=SSE_PING_INTERVAL)
