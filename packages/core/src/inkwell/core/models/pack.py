"""图片包与流式事件模型"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .birthday import BirthdayImage
from .enums import Difficulty, PackEventType


class Category(BaseModel):
    """内容分类"""

    id: str
    label: str
    icon: str = ""
    examples: list[str] = Field(default_factory=list)


class Pack(BaseModel):
    """图片包定义（静态目录）"""

    id: str
    title: str
    emoji: str = ""
    description: str = ""
    category: str
    difficulty: Difficulty = Difficulty.MEDIUM
    age_range: str = Field(default="5-8", description="适龄范围，如 5-8")


class PackImage(BaseModel):
    """图片包内已生成的单页"""

    id: str = Field(description="唯一标识，ULID 格式")
    pack_id: str
    topic: str
    artifact_ref: str
    artifact_url: str
    prompt: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    age_range: str = ""
    category: str | None = None
    position: int = Field(ge=0, description="包内序号，从 0 开始")
    mime_type: str = "image/png"
    provider: str | None = None
    created_at: datetime


class PackEvent(BaseModel):
    """流式批量生成事件

    type 决定 data 的内容：
    - status: {message, topics?}
    - progress: {current, total, topic}
    - item: {image}
    - item_error: {topic, message}
    - complete: {total}
    - fatal: {message}
    """

    type: PackEventType
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def status(cls, message: str, **extra: Any) -> "PackEvent":
        return cls(type=PackEventType.STATUS, data={"message": message, **extra})

    @classmethod
    def progress(cls, current: int, total: int, topic: str) -> "PackEvent":
        return cls(
            type=PackEventType.PROGRESS,
            data={"current": current, "total": total, "topic": topic},
        )

    @classmethod
    def item(cls, image: PackImage | BirthdayImage) -> "PackEvent":
        return cls(type=PackEventType.ITEM, data={"image": image.model_dump(mode="json")})

    @classmethod
    def item_error(cls, topic: str, message: str) -> "PackEvent":
        return cls(type=PackEventType.ITEM_ERROR, data={"topic": topic, "message": message})

    @classmethod
    def complete(cls, total: int) -> "PackEvent":
        return cls(type=PackEventType.COMPLETE, data={"total": total})

    @classmethod
    def fatal(cls, message: str) -> "PackEvent":
        return cls(type=PackEventType.FATAL, data={"message": message})
