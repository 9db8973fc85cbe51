"""生日包模型"""

from datetime import datetime

from pydantic import BaseModel, Field


class BirthdayTheme(BaseModel):
    """生日主题（静态目录）"""

    id: str
    label: str
    emoji: str = ""


class BirthdayRequest(BaseModel):
    """生日页请求

    child_name 与 theme 的必填校验由 BirthdayService 完成，以返回统一的 400。
    """

    child_name: str = Field(default="", max_length=50, description="寿星名字")
    age: int | None = Field(default=None, ge=1, le=18, description="将要满的岁数")
    theme: str = Field(default="", description="主题 id，如 unicorn")
    theme_label: str | None = Field(default=None, description="主题显示名，缺省为主题 id")
    message: str = Field(default="", max_length=200, description="祝福语")


class BirthdayImage(BaseModel):
    """生日页生成结果，不写入图库"""

    id: str = Field(description="唯一标识，ULID 格式")
    topic: str
    artifact_url: str
    prompt: str
    child_name: str
    age: int | None = None
    theme: str
    message: str = ""
    mime_type: str = "image/png"
    provider: str | None = None
    download_count: int = 0
    print_count: int = 0
    created_at: datetime
