"""解析路由

POST /api/generate: 按 缓存 -> 图库 -> 生成 解析主题；force_new 跳过前两层并受限流约束。
"""

import structlog
from fastapi import APIRouter, Depends
from inkwell.core.exceptions import InvalidInputError, PersistenceError, RateLimitedError
from inkwell.core.models import ResolutionRequest, ResolutionResult
from inkwell.provider import ProviderExhaustedError
from pydantic import BaseModel, Field

from ..deps import get_client_id, get_resolution_service
from ..services.resolution_service import ResolutionService
from .errors import error_response

log = structlog.get_logger()

router = APIRouter()


class GenerateRequest(BaseModel):
    """解析请求体"""

    topic: str = Field(description="主题，最长 100 个字符，去除首尾空白后不能为空")
    category: str | None = Field(default=None, description="可选分类")
    force_new: bool = Field(default=False, description="跳过缓存与图库，强制生成")


@router.post("/api/generate", response_model=ResolutionResult)
async def generate(
    body: GenerateRequest,
    client_id: str = Depends(get_client_id),
    service: ResolutionService = Depends(get_resolution_service),
):
    """解析主题为一张涂色页"""
    request = ResolutionRequest(
        topic=body.topic,
        category=body.category,
        force_new=body.force_new,
        client_id=client_id,
    )
    try:
        return await service.resolve(request)
    except InvalidInputError as e:
        return error_response(400, "INVALID_INPUT", str(e))
    except RateLimitedError as e:
        return error_response(
            429,
            "RATE_LIMITED",
            str(e),
            headers={"Retry-After": str(e.retry_after_s)},
            retry_after=e.retry_after_s,
        )
    except ProviderExhaustedError as e:
        return error_response(502, "PROVIDERS_EXHAUSTED", str(e), attempted=e.attempted)
    except PersistenceError as e:
        log.error("generate_persistence_failed", error=str(e))
        return error_response(500, "PERSISTENCE_FAILED", str(e))
