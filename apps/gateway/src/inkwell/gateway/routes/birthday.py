"""生日路由

GET  /api/birthday/themes                生日主题列表
POST /api/birthday/generate              生成一张生日页
GET  /api/birthday/generate-pack-stream  SSE 流式生成生日包

生日页不进入图库缓存。
"""

import structlog
from fastapi import APIRouter, Depends, Query, Request
from inkwell.core.catalog import BIRTHDAY_THEMES
from inkwell.core.config import SSE_PING_INTERVAL
from inkwell.core.exceptions import InvalidInputError, PersistenceError
from inkwell.core.models import BirthdayImage, BirthdayRequest
from inkwell.provider import ProviderExhaustedError
from sse_starlette.sse import EventSourceResponse

from ..deps import get_birthday_service
from ..services.birthday_service import BirthdayService, validate_birthday_request
from .errors import error_response
from .packs import event_to_sse

log = structlog.get_logger()

router = APIRouter(prefix="/api/birthday")


@router.get("/themes")
async def list_themes():
    return {"themes": BIRTHDAY_THEMES}


@router.post("/generate", response_model=BirthdayImage)
async def generate_birthday_page(
    body: BirthdayRequest,
    service: BirthdayService = Depends(get_birthday_service),
):
    """随机挑选一个生日主题生成单页"""
    try:
        return await service.generate_single(body)
    except InvalidInputError as e:
        return error_response(400, "INVALID_INPUT", str(e))
    except ProviderExhaustedError as e:
        return error_response(502, "PROVIDERS_EXHAUSTED", str(e), attempted=e.attempted)
    except PersistenceError as e:
        log.error("birthday_persistence_failed", error=str(e))
        return error_response(500, "PERSISTENCE_FAILED", str(e))


@router.get("/generate-pack-stream")
async def generate_birthday_pack_stream(
    request: Request,
    child_name: str = Query(default="", max_length=50),
    theme: str = Query(default=""),
    age: int | None = Query(default=None, ge=1, le=18),
    theme_label: str | None = Query(default=None),
    message: str = Query(default="", max_length=200),
    service: BirthdayService = Depends(get_birthday_service),
):
    """SSE 流式生成生日包，事件格式与图片包相同

    参数校验失败时在建立流之前返回 400。
    """
    try:
        body = validate_birthday_request(
            BirthdayRequest(
                child_name=child_name,
                theme=theme,
                age=age,
                theme_label=theme_label,
                message=message,
            )
        )
    except InvalidInputError as e:
        return error_response(400, "INVALID_INPUT", str(e))

    async def event_generator():
        async for event in service.stream_pack(body, request.is_disconnected):
            yield event_to_sse(event)

    return EventSourceResponse(event_generator(), ping=SSE_PING_INTERVAL)
