"""Provider 注册表 -- 声明式 provider 清单

启动时根据 ProviderSpec 列表 + ProviderConfig 构建有序的 ImageProvider 列表，
运行期间不变。顺序即策略：priority 越小越先尝试。
"""

from collections.abc import Callable
from typing import Literal

import httpx
import structlog
from pydantic import BaseModel, Field

from .adapters import (
    FalProvider,
    HuggingFaceProvider,
    PlaceholderProvider,
    PollinationsProvider,
    ReplicateProvider,
)
from .base import ImageProvider
from .config import ProviderConfig

log = structlog.get_logger()


class ProviderSpec(BaseModel):
    """单个 provider 的声明"""

    name: str = Field(description="provider 名称，对应工厂表中的 key")
    priority: int = Field(description="尝试顺序，越小越先")
    style: Literal["sync", "polling", "local"] = Field(
        default="sync",
        description="调用方式，决定使用哪一档超时",
    )


# 默认 provider 清单：免费优先，付费次之，异步轮询最后
DEFAULT_PROVIDER_SPECS: tuple[ProviderSpec, ...] = (
    ProviderSpec(name="pollinations", priority=10, style="sync"),
    ProviderSpec(name="huggingface", priority=20, style="sync"),
    ProviderSpec(name="fal", priority=30, style="sync"),
    ProviderSpec(name="replicate", priority=40, style="polling"),
)


# echo 模式只保留本地占位 provider
_ECHO_SPECS = [ProviderSpec(name="placeholder", priority=0, style="local")]

# 本地渲染超时（秒）
LOCAL_TIMEOUT_S = 5.0

_Factory = Callable[[httpx.AsyncClient, int, float, ProviderConfig], ImageProvider]

_FACTORIES: dict[str, _Factory] = {
    "pollinations": lambda http, prio, timeout, cfg: PollinationsProvider(http, prio, timeout),
    "huggingface": lambda http, prio, timeout, cfg: HuggingFaceProvider(
        http, prio, timeout, api_token=cfg.hugging_face_api_token.get_secret_value()
    ),
    "fal": lambda http, prio, timeout, cfg: FalProvider(
        http, prio, timeout, api_key=cfg.fal_key.get_secret_value()
    ),
    "replicate": lambda http, prio, timeout, cfg: ReplicateProvider(
        http, prio, timeout, api_token=cfg.replicate_api_token.get_secret_value()
    ),
    "placeholder": lambda http, prio, timeout, cfg: PlaceholderProvider(http, prio, timeout),
}


def _apply_order(specs: list[ProviderSpec], order: list[str]) -> list[ProviderSpec]:
    """按显式顺序重排并重新编号 priority；未列出的 provider 被移除"""
    by_name = {spec.name: spec for spec in specs}
    ordered: list[ProviderSpec] = []
    for index, name in enumerate(order):
        spec = by_name.get(name)
        if spec is None:
            log.warning("unknown_provider_in_order", provider=name)
            continue
        ordered.append(spec.model_copy(update={"priority": (index + 1) * 10}))
    return ordered


def build_providers(
    config: ProviderConfig,
    http_client: httpx.AsyncClient,
    specs: list[ProviderSpec] | None = None,
) -> list[ImageProvider]:
    """根据声明清单与配置构建 provider 列表（按 priority 升序）

    Args:
        config: Provider 配置
        http_client: 共享 HTTP 客户端
        specs: provider 清单，None 时使用默认清单（echo 模式使用占位清单）
    """
    if specs is None:
        specs = _ECHO_SPECS if config.generation_mode == "echo" else list(DEFAULT_PROVIDER_SPECS)
        if config.provider_order and config.generation_mode != "echo":
            specs = _apply_order(specs, config.provider_order)

    timeouts = {
        "sync": config.provider_timeout_s,
        "polling": config.polling_timeout_s,
        "local": LOCAL_TIMEOUT_S,
    }

    providers: list[ImageProvider] = []
    for spec in sorted(specs, key=lambda s: s.priority):
        factory = _FACTORIES.get(spec.name)
        if factory is None:
            log.warning("unknown_provider_spec", provider=spec.name)
            continue
        providers.append(factory(http_client, spec.priority, timeouts[spec.style], config))

    log.info(
        "providers_built",
        mode=config.generation_mode,
        providers=[p.name for p in providers],
        configured=[p.name for p in providers if p.is_configured()],
    )
    return providers
