"""ProviderConfig -- Provider 配置加载

从环境变量加载配置，provider 顺序与凭据都不硬编码在调用方。
"""

import os
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()


class ProviderConfig(BaseModel):
    """Provider 包配置 -- 从环境变量加载

    环境变量:
        INKWELL_GENERATION_MODE: 图片生成模式（live/echo）
        INKWELL_PROVIDER_ORDER: 逗号分隔的 provider 名称，覆盖默认顺序
        HUGGING_FACE_API_TOKEN / FAL_KEY / REPLICATE_API_TOKEN: provider 凭据
        INKWELL_PROVIDER_TIMEOUT_S: 同步 provider 超时（秒，默认 15）
        INKWELL_POLLING_TIMEOUT_S: 轮询型 provider 超时（秒，默认 60）
        INKWELL_LIBRARY_BACKENDS: 逗号分隔的图库后端（默认 wikimedia）
        INKWELL_LIBRARY_TIMEOUT_S: 单个图库后端超时（秒，默认 10）
        LITELLM_PROXY_URL / LITELLM_PROXY_KEY: 主题生成使用的 LiteLLM Proxy
        INKWELL_KEYWORD_MODE: 图片包主题来源（litellm/static）
        INKWELL_LLM_TIMEOUT_S: LLM 调用超时（秒，默认 30）
    """

    generation_mode: Literal["live", "echo"] = Field(
        default="live",
        description="live 调用外部 provider；echo 只使用本地占位 provider",
    )
    provider_order: list[str] = Field(
        default_factory=list,
        description="provider 名称顺序，空表示使用默认 priority",
    )
    hugging_face_api_token: SecretStr = Field(default=SecretStr(""))
    fal_key: SecretStr = Field(default=SecretStr(""))
    replicate_api_token: SecretStr = Field(default=SecretStr(""))
    provider_timeout_s: float = Field(default=15.0, gt=0, description="同步 provider 超时")
    polling_timeout_s: float = Field(default=60.0, gt=0, description="轮询型 provider 超时")
    library_backends: list[str] = Field(default_factory=lambda: ["wikimedia"])
    library_timeout_s: float = Field(default=10.0, gt=0)
    proxy_base_url: str = Field(
        default="http://localhost:4000",
        description="LiteLLM Proxy 基础 URL",
    )
    proxy_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Proxy 访问密钥（不是 LLM provider API key）",
    )
    keyword_mode: Literal["litellm", "static"] = Field(
        default="litellm",
        description="图片包主题来源：litellm / static",
    )
    llm_timeout_s: int = Field(default=30, ge=1, description="LLM 调用超时（秒）")


def _split_csv(val: str) -> list[str]:
    return [item.strip().lower() for item in val.split(",") if item.strip()]


def _parse_float(env_var: str, val: str, fallback: float) -> float | None:
    try:
        return float(val)
    except ValueError:
        log.warning("invalid_timeout_config", env_var=env_var, value=val, fallback=fallback)
        # 使用默认值，不阻塞启动
        return None


def load_provider_config() -> ProviderConfig:
    """从环境变量加载 Provider 配置

    数值型变量非法时记录 warning 并保留默认值。

    Returns:
        ProviderConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("INKWELL_GENERATION_MODE"):
        kwargs["generation_mode"] = val.lower()

    if val := os.environ.get("INKWELL_PROVIDER_ORDER"):
        kwargs["provider_order"] = _split_csv(val)

    if val := os.environ.get("HUGGING_FACE_API_TOKEN"):
        kwargs["hugging_face_api_token"] = SecretStr(val)

    if val := os.environ.get("FAL_KEY"):
        kwargs["fal_key"] = SecretStr(val)

    if val := os.environ.get("REPLICATE_API_TOKEN"):
        kwargs["replicate_api_token"] = SecretStr(val)

    for env_var, field, default in (
        ("INKWELL_PROVIDER_TIMEOUT_S", "provider_timeout_s", 15.0),
        ("INKWELL_POLLING_TIMEOUT_S", "polling_timeout_s", 60.0),
        ("INKWELL_LIBRARY_TIMEOUT_S", "library_timeout_s", 10.0),
    ):
        if val := os.environ.get(env_var):
            parsed = _parse_float(env_var, val, default)
            if parsed is not None:
                kwargs[field] = parsed

    if (val := os.environ.get("INKWELL_LIBRARY_BACKENDS")) is not None:
        kwargs["library_backends"] = _split_csv(val)

    if val := os.environ.get("LITELLM_PROXY_URL"):
        kwargs["proxy_base_url"] = val

    if val := os.environ.get("LITELLM_PROXY_KEY"):
        kwargs["proxy_api_key"] = SecretStr(val)

    if val := os.environ.get("INKWELL_KEYWORD_MODE"):
        kwargs["keyword_mode"] = val.lower()

    if val := os.environ.get("INKWELL_LLM_TIMEOUT_S"):
        try:
            kwargs["llm_timeout_s"] = int(val)
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var="INKWELL_LLM_TIMEOUT_S",
                value=val,
                fallback=30,
            )

    return ProviderConfig(**kwargs)
