"""解析请求与结果模型"""

from datetime import datetime

from pydantic import BaseModel, Field

from .cache import CacheEntry
from .enums import ResolutionState, SourceKind


class ResolutionRequest(BaseModel):
    """一次解析请求

    topic 的合法性由 ResolutionService 在执行任何层级之前校验。
    """

    topic: str = Field(description="用户输入的主题")
    category: str | None = Field(default=None, description="可选分类")
    force_new: bool = Field(default=False, description="跳过缓存与图库，强制生成")
    client_id: str = Field(default="unknown", description="客户端标识（网络地址）")


class ResolutionResult(BaseModel):
    """解析结果"""

    id: str
    topic: str
    category: str | None = None
    artifact_url: str
    prompt: str = ""
    mime_type: str = "image/png"
    source_kind: SourceKind
    from_cache: bool = False
    from_library: bool = False
    provider_used: str | None = None
    download_count: int = 0
    print_count: int = 0
    created_at: datetime
    resolution_path: list[ResolutionState] = Field(
        default_factory=list,
        description="本次解析经过的状态序列",
    )

    @classmethod
    def from_entry(
        cls,
        entry: CacheEntry,
        *,
        from_cache: bool = False,
        from_library: bool = False,
        resolution_path: list[ResolutionState] | None = None,
    ) -> "ResolutionResult":
        """从缓存条目构造结果"""
        return cls(
            id=entry.id,
            topic=entry.topic,
            category=entry.category,
            artifact_url=entry.artifact_url,
            prompt=entry.prompt,
            mime_type=entry.mime_type,
            source_kind=entry.source_kind,
            from_cache=from_cache,
            from_library=from_library,
            provider_used=entry.provider,
            download_count=entry.download_count,
            print_count=entry.print_count,
            created_at=entry.created_at,
            resolution_path=list(resolution_path or []),
        )
