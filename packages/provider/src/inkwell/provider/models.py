"""数据模型 -- RawArtifact + GenerationResult + ProviderStatus + LibraryCandidate"""

from pydantic import BaseModel, ConfigDict, Field


class RawArtifact(BaseModel):
    """provider 或图库返回的原始图片

    mime_type 为声明值，校验后替换为按魔数识别的实际值。
    """

    model_config = ConfigDict(frozen=True)

    buffer: bytes = Field(repr=False, description="图片字节")
    mime_type: str | None = Field(default=None, description="MIME 类型")
    width: int | None = Field(default=None, description="宽度（像素），SVG 为 None")
    height: int | None = Field(default=None, description="高度（像素），SVG 为 None")

    @property
    def size(self) -> int:
        return len(self.buffer)


class GenerationResult(BaseModel):
    """ProviderChain.generate 的返回值"""

    artifact: RawArtifact
    provider: str = Field(description="成功的 provider 名称")
    attempted: list[str] = Field(
        default_factory=list,
        description="按顺序实际尝试过的 provider（含成功者）",
    )
    duration_ms: int = Field(ge=0, description="整条链耗时（毫秒）")


class ProviderStatus(BaseModel):
    """provider 状态（/api/providers/status）"""

    name: str
    priority: int
    timeout_s: float
    configured: bool
    description: str = ""


class LibraryCandidate(BaseModel):
    """图库候选图片"""

    url: str = Field(description="图片直链")
    source_name: str = Field(description="来源名称，如 wikimedia")
    title: str = ""
    source_page: str | None = Field(default=None, description="来源页面")
    mime_type: str | None = None
