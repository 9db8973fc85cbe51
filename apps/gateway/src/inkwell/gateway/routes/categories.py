"""分类路由

GET /api/categories: 全部分类
GET /api/categories/random: 随机主题（可按分类）
"""

from fastapi import APIRouter, Query
from inkwell.core.catalog import CATEGORIES
from inkwell.core.prompts import random_topic

router = APIRouter(prefix="/api/categories")


@router.get("")
async def list_categories():
    return {"categories": CATEGORIES}


@router.get("/random")
async def random_category_topic(category: str | None = Query(default=None)):
    return {"topic": random_topic(category), "category": category}
