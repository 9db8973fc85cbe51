"""ProviderChain -- 有序 provider 降级链

按 priority 依次尝试：跳过未配置的 provider（不发起网络请求），
每次尝试受 provider 自身 timeout_s 约束，结果经过校验，首个成功者胜出。
不维护跨请求的"降级状态"。
"""

import asyncio
import time

import structlog

from .base import ImageProvider
from .exceptions import ProviderExhaustedError
from .models import GenerationResult, ProviderStatus
from .validation import inspect_artifact

log = structlog.get_logger()


class ProviderChain:
    """图片生成降级链"""

    def __init__(self, providers: list[ImageProvider]) -> None:
        """
        Args:
            providers: provider 列表，按 priority 稳定排序后固定
        """
        self._providers = sorted(providers, key=lambda p: p.priority)

    @property
    def providers(self) -> list[ImageProvider]:
        return list(self._providers)

    async def generate(self, prompt: str) -> GenerationResult:
        """依次尝试 provider，返回第一个通过校验的结果

        Returns:
            GenerationResult，attempted 包含成功者及之前失败的已配置 provider

        Raises:
            ProviderExhaustedError: 所有已配置 provider 都失败（或没有已配置的 provider）
        """
        start_time = time.monotonic()
        attempted: list[str] = []
        errors: dict[str, str] = {}

        for provider in self._providers:
            if not provider.is_configured():
                log.debug("provider_skipped_unconfigured", provider=provider.name)
                continue

            attempted.append(provider.name)
            try:
                raw = await asyncio.wait_for(provider.attempt(prompt), timeout=provider.timeout_s)
                artifact = inspect_artifact(raw.buffer)
            except TimeoutError:
                errors[provider.name] = f"timeout after {provider.timeout_s}s"
                log.warning(
                    "provider_attempt_timeout",
                    provider=provider.name,
                    timeout_s=provider.timeout_s,
                )
                continue
            except Exception as e:
                errors[provider.name] = str(e) or type(e).__name__
                log.warning(
                    "provider_attempt_failed",
                    provider=provider.name,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue

            duration_ms = int((time.monotonic() - start_time) * 1000)
            log.info(
                "provider_attempt_succeeded",
                provider=provider.name,
                attempted=attempted,
                mime_type=artifact.mime_type,
                size=artifact.size,
                duration_ms=duration_ms,
            )
            return GenerationResult(
                artifact=artifact,
                provider=provider.name,
                attempted=attempted,
                duration_ms=duration_ms,
            )

        log.error("all_providers_failed", attempted=attempted, errors=errors)
        raise ProviderExhaustedError(attempted=attempted, errors=errors)

    def status(self) -> list[ProviderStatus]:
        """各 provider 的名称、顺序、超时与配置状态"""
        return [provider.status() for provider in self._providers]
