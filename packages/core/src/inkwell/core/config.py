"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、本地上传目录、限流窗口、SSE 心跳、对象存储等可配置项。
"""

import os
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("INKWELL_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "INKWELL_DB_PATH",
        str(_get_base_dir() / "sqlite" / "inkwell.db"),
    )


def get_uploads_dir() -> Path:
    """获取本地图片存储目录（本地存储后端使用）"""
    return Path(
        os.environ.get(
            "INKWELL_UPLOADS_DIR",
            str(_get_base_dir() / "uploads"),
        )
    )


def _get_int(env_var: str, default: int) -> int:
    """读取整数环境变量，非法值记录 warning 并回退默认值"""
    val = os.environ.get(env_var)
    if not val:
        return default
    try:
        return int(val)
    except ValueError:
        log.warning("invalid_int_config", env_var=env_var, value=val, fallback=default)
        return default


def get_rate_limit_window_s() -> int:
    """强制生成请求的滑动窗口长度（秒）"""
    return _get_int("INKWELL_RATE_LIMIT_WINDOW_S", 3600)


def get_rate_limit_max() -> int:
    """每个客户端在窗口内允许的强制生成次数"""
    return _get_int("INKWELL_RATE_LIMIT_MAX", 10)


def get_rate_limit_sweep_s() -> int:
    """限流表清扫周期（秒）"""
    return _get_int("INKWELL_RATE_LIMIT_SWEEP_S", 600)


# 主题最大长度（去除首尾空白后）
TOPIC_MAX_LENGTH: int = 100

# 图片包固定页数
PACK_SIZE: int = _get_int("INKWELL_PACK_SIZE", 24)

# SSE 心跳间隔（秒）
SSE_PING_INTERVAL: int = _get_int("INKWELL_SSE_PING_INTERVAL", 15)

# 下载外部图片的超时（秒）
DOWNLOAD_TIMEOUT_S: float = 30.0


class StorageConfig(BaseModel):
    """对象存储配置（S3 兼容，如 Cloudflare R2）

    bucket / endpoint / 凭据 / 公网 URL 齐全时才启用对象存储，
    否则回退到本地上传目录。
    """

    endpoint_url: str = Field(default="", description="S3 兼容 endpoint")
    access_key_id: SecretStr = Field(default=SecretStr(""), description="访问密钥 ID")
    secret_access_key: SecretStr = Field(default=SecretStr(""), description="访问密钥")
    bucket: str = Field(default="", description="存储桶名称")
    public_base_url: str = Field(default="", description="对外访问的基础 URL")
    region: str = Field(default="auto", description="区域（R2 固定为 auto）")

    @property
    def is_complete(self) -> bool:
        """对象存储配置是否齐全"""
        return all(
            [
                self.endpoint_url,
                self.access_key_id.get_secret_value(),
                self.secret_access_key.get_secret_value(),
                self.bucket,
                self.public_base_url,
            ]
        )


def load_storage_config() -> StorageConfig:
    """从环境变量加载对象存储配置

    环境变量映射:
        INKWELL_S3_ENDPOINT -> endpoint_url（优先）
        R2_ACCOUNT_ID -> endpoint_url = https://{id}.r2.cloudflarestorage.com
        R2_ACCESS_KEY_ID / R2_SECRET_ACCESS_KEY -> 凭据
        R2_BUCKET_NAME -> bucket
        R2_PUBLIC_URL -> public_base_url
    """
    kwargs: dict = {}

    if val := os.environ.get("INKWELL_S3_ENDPOINT"):
        kwargs["endpoint_url"] = val
    elif val := os.environ.get("R2_ACCOUNT_ID"):
        kwargs["endpoint_url"] = f"https://{val}.r2.cloudflarestorage.com"

    if val := os.environ.get("R2_ACCESS_KEY_ID"):
        kwargs["access_key_id"] = SecretStr(val)

    if val := os.environ.get("R2_SECRET_ACCESS_KEY"):
        kwargs["secret_access_key"] = SecretStr(val)

    if val := os.environ.get("R2_BUCKET_NAME"):
        kwargs["bucket"] = val

    if val := os.environ.get("R2_PUBLIC_URL"):
        kwargs["public_base_url"] = val.rstrip("/")

    return StorageConfig(**kwargs)
