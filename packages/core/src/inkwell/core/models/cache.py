"""缓存条目与图库查询模型"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import SourceKind


class CacheKey(BaseModel):
    """缓存键 -- 归一化主题 + 可选分类"""

    topic_normalized: str = Field(description="归一化后的主题")
    category: str | None = Field(default=None, description="分类，None 表示不限分类")

    def __str__(self) -> str:
        return f"{self.topic_normalized}|{self.category or ''}"


class CacheEntry(BaseModel):
    """已持久化图片的缓存记录

    只通过 insert 和计数器递增修改。
    """

    id: str = Field(description="唯一标识，ULID 格式")
    topic: str = Field(description="原始主题（已去首尾空白）")
    topic_normalized: str = Field(description="归一化主题")
    category: str | None = Field(default=None, description="分类")
    prompt: str = Field(default="", description="生成时使用的 prompt")
    artifact_ref: str = Field(description="存储后端内的对象定位符")
    artifact_url: str = Field(description="对外访问地址")
    mime_type: str = Field(default="image/png", description="MIME 类型")
    file_size: int = Field(default=0, ge=0, description="字节数")
    width: int | None = Field(default=None, description="宽度（像素）")
    height: int | None = Field(default=None, description="高度（像素）")
    download_count: int = Field(default=0, ge=0)
    print_count: int = Field(default=0, ge=0)
    source_kind: SourceKind = Field(default=SourceKind.UNKNOWN, description="来源")
    provider: str | None = Field(default=None, description="生成该图片的 provider")
    created_at: datetime = Field(description="创建时间（UTC）")
    is_active: bool = Field(default=True)


class GalleryPage(BaseModel):
    """图库分页结果"""

    images: list[CacheEntry] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    total_pages: int = Field(default=0, ge=0)
    has_more: bool = Field(default=False)


class CategoryCount(BaseModel):
    """单个分类的图片数量"""

    category: str
    count: int


class GalleryStats(BaseModel):
    """图库统计"""

    total_images: int = 0
    total_downloads: int = 0
    by_category: list[CategoryCount] = Field(default_factory=list)
