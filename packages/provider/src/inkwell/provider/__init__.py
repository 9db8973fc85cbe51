"""Inkwell Provider -- 图片生成与外部图库抽象层

packages/provider 的公开接口导出。
"""

from .base import ImageProvider
from .chain import ProviderChain
from .client import LiteLLMClient
from .config import ProviderConfig, load_provider_config
from .exceptions import (
    InvalidArtifactError,
    LLMUnreachableError,
    ProviderError,
    ProviderExhaustedError,
)
from .library import LibraryResolver, build_library_resolver
from .models import GenerationResult, LibraryCandidate, ProviderStatus, RawArtifact
from .registry import ProviderSpec, build_providers
from .validation import ACCEPTED_MIME_TYPES, detect_mime_type, inspect_artifact

__all__ = [
    "RawArtifact",
    "GenerationResult",
    "ProviderStatus",
    "LibraryCandidate",
    "ImageProvider",
    "ProviderChain",
    "ProviderSpec",
    "build_providers",
    "LibraryResolver",
    "build_library_resolver",
    "LiteLLMClient",
    "ProviderConfig",
    "load_provider_config",
    "ACCEPTED_MIME_TYPES",
    "detect_mime_type",
    "inspect_artifact",
    "ProviderError",
    "InvalidArtifactError",
    "LLMUnreachableError",
    "ProviderExhaustedError",
]
