"""主题归一化与缓存键

同一归一化主题 + 分类 必然得到同一缓存键。
"""

import re

from .config import TOPIC_MAX_LENGTH
from .exceptions import InvalidInputError
from .models.cache import CacheKey

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_topic(topic: str) -> str:
    """小写、去首尾空白、内部连续空白折叠为单个空格

    幂等：normalize_topic(normalize_topic(x)) == normalize_topic(x)
    """
    return _WHITESPACE_RE.sub(" ", topic.lower().strip())


def make_cache_key(topic: str, category: str | None = None) -> CacheKey:
    """根据主题和可选分类构造缓存键"""
    return CacheKey(
        topic_normalized=normalize_topic(topic),
        category=category or None,
    )


def validate_topic(topic: object) -> str:
    """校验主题并返回去除首尾空白后的文本

    Raises:
        InvalidInputError: 非字符串、去空白后为空、或原始长度超过上限
    """
    if not isinstance(topic, str):
        raise InvalidInputError("topic 必须是字符串")
    trimmed = topic.strip()
    if not trimmed:
        raise InvalidInputError("topic 不能为空")
    # 长度按原始输入计算，首尾空白也计入
    if len(topic) > TOPIC_MAX_LENGTH:
        raise InvalidInputError(f"topic 长度不能超过 {TOPIC_MAX_LENGTH} 个字符")
    return trimmed
