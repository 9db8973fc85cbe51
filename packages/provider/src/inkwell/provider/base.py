"""ImageProvider 抽象基类

每个 provider 暴露 name / priority / timeout_s / is_configured() / attempt(prompt)。
超时由 ProviderChain 统一施加，adapter 内部的 httpx 超时只是兜底。
"""

from abc import ABC, abstractmethod

import httpx

from .models import ProviderStatus, RawArtifact


class ImageProvider(ABC):
    """图片生成 provider"""

    name: str = "base"
    description: str = ""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        priority: int,
        timeout_s: float,
    ) -> None:
        self._http = http_client
        self.priority = priority
        self.timeout_s = timeout_s

    def is_configured(self) -> bool:
        """是否具备调用条件（如 API 凭据）；未配置的 provider 不发起网络请求"""
        return True

    @abstractmethod
    async def attempt(self, prompt: str) -> RawArtifact:
        """生成一张图片

        Raises:
            任意异常均视为本 provider 失败，由 ProviderChain 记录后切换下一个
        """

    def status(self) -> ProviderStatus:
        return ProviderStatus(
            name=self.name,
            priority=self.priority,
            timeout_s=self.timeout_s,
            configured=self.is_configured(),
            description=self.description,
        )

    async def _download(self, url: str) -> bytes:
        """下载 provider 返回的图片链接"""
        response = await self._http.get(url, timeout=self.timeout_s)
        response.raise_for_status()
        return response.content
