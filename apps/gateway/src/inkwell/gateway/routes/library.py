"""图库检索路由

GET /api/library/search: 直接检索外部图库，不下载不入库。
"""

from fastapi import APIRouter, Depends, Query
from inkwell.core.exceptions import InvalidInputError
from inkwell.core.keys import validate_topic
from inkwell.provider import LibraryResolver

from ..deps import get_library_resolver
from .errors import error_response

router = APIRouter()


@router.get("/api/library/search")
async def search_library(
    topic: str = Query(description="检索主题"),
    category: str | None = Query(default=None),
    resolver: LibraryResolver = Depends(get_library_resolver),
):
    try:
        topic = validate_topic(topic)
    except InvalidInputError as e:
        return error_response(400, "INVALID_INPUT", str(e))

    candidates = await resolver.search(topic, category)
    return {"topic": topic, "count": len(candidates), "results": candidates}
