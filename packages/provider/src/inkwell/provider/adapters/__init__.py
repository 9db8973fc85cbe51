"""图片生成 provider 实现"""

from .fal import FalProvider
from .huggingface import HuggingFaceProvider
from .placeholder import PlaceholderProvider
from .pollinations import PollinationsProvider
from .replicate import ReplicateProvider

__all__ = [
    "PollinationsProvider",
    "HuggingFaceProvider",
    "FalProvider",
    "ReplicateProvider",
    "PlaceholderProvider",
]
