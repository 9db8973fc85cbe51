"""枚举定义

包含 ResolutionState 解析状态机（VALID_TRANSITIONS 合法流转映射 + TERMINAL_STATES 终态集合）、
SourceKind、CounterName、GallerySort、Difficulty、PackEventType。
"""

from enum import StrEnum


class ResolutionState(StrEnum):
    """单次解析请求的状态机"""

    RATE_CHECK = "RATE_CHECK"
    CACHE_CHECK = "CACHE_CHECK"
    LIBRARY_SEARCH = "LIBRARY_SEARCH"
    GENERATE = "GENERATE"
    PERSIST = "PERSIST"

    # 终态
    DONE = "DONE"
    REJECTED = "REJECTED"
    FAILED = "FAILED"


# 合法状态流转：每个状态至多进入一次，不存在回边
VALID_TRANSITIONS: dict[ResolutionState, set[ResolutionState]] = {
    ResolutionState.RATE_CHECK: {ResolutionState.GENERATE, ResolutionState.REJECTED},
    ResolutionState.CACHE_CHECK: {ResolutionState.DONE, ResolutionState.LIBRARY_SEARCH},
    ResolutionState.LIBRARY_SEARCH: {ResolutionState.PERSIST, ResolutionState.GENERATE},
    ResolutionState.GENERATE: {ResolutionState.PERSIST, ResolutionState.FAILED},
    ResolutionState.PERSIST: {ResolutionState.DONE, ResolutionState.FAILED},
    # 终态不可再流转
    ResolutionState.DONE: set(),
    ResolutionState.REJECTED: set(),
    ResolutionState.FAILED: set(),
}

TERMINAL_STATES: set[ResolutionState] = {
    ResolutionState.DONE,
    ResolutionState.REJECTED,
    ResolutionState.FAILED,
}


def validate_transition(from_state: ResolutionState, to_state: ResolutionState) -> bool:
    """验证状态流转是否合法

    Args:
        from_state: 当前状态
        to_state: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_TRANSITIONS.get(from_state, set())
    return to_state in allowed


class SourceKind(StrEnum):
    """缓存条目来源"""

    GENERATED = "generated"
    LIBRARY = "library"
    UNKNOWN = "unknown"


class CounterName(StrEnum):
    """可递增的计数器列名"""

    DOWNLOAD = "download_count"
    PRINT = "print_count"


class GallerySort(StrEnum):
    """图库排序方式"""

    NEWEST = "newest"
    POPULAR = "popular"


class Difficulty(StrEnum):
    """图片包难度"""

    SIMPLE = "simple"
    MEDIUM = "medium"
    DETAILED = "detailed"


class PackEventType(StrEnum):
    """图片包流式生成事件类型"""

    STATUS = "status"
    PROGRESS = "progress"
    ITEM = "item"
    ITEM_ERROR = "item_error"
    COMPLETE = "complete"
    FATAL = "fatal"
