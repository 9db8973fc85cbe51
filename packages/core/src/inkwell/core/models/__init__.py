"""Inkwell Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .birthday import BirthdayImage, BirthdayRequest, BirthdayTheme
from .cache import CacheEntry, CacheKey, CategoryCount, GalleryPage, GalleryStats
from .enums import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    CounterName,
    Difficulty,
    GallerySort,
    PackEventType,
    ResolutionState,
    SourceKind,
    validate_transition,
)
from .pack import Category, Pack, PackEvent, PackImage
from .resolution import ResolutionRequest, ResolutionResult

__all__ = [
    # 枚举
    "ResolutionState",
    "SourceKind",
    "CounterName",
    "GallerySort",
    "Difficulty",
    "PackEventType",
    # 状态机
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
    "validate_transition",
    # 缓存
    "CacheKey",
    "CacheEntry",
    "GalleryPage",
    "GalleryStats",
    "CategoryCount",
    # 解析
    "ResolutionRequest",
    "ResolutionResult",
    # 图片包
    "Category",
    "Pack",
    "PackImage",
    "PackEvent",
    # 生日包
    "BirthdayTheme",
    "BirthdayRequest",
    "BirthdayImage",
]
