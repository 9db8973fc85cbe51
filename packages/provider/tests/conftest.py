"""Provider 包测试 fixtures"""

import asyncio
from collections.abc import Callable

import httpx
import pytest
from inkwell.provider.base import ImageProvider
from inkwell.provider.models import RawArtifact


class FakeProvider(ImageProvider):
    """按预设行为返回或失败的 provider，记录调用次数"""

    def __init__(
        self,
        name: str,
        priority: int,
        *,
        buffer: bytes | None = None,
        error: Exception | None = None,
        delay_s: float = 0.0,
        configured: bool = True,
        timeout_s: float = 1.0,
    ) -> None:
        super().__init__(None, priority, timeout_s)
        self.name = name
        self._buffer = buffer
        self._error = error
        self._delay_s = delay_s
        self._configured = configured
        self.calls = 0

    def is_configured(self) -> bool:
        return self._configured

    async def attempt(self, prompt: str) -> RawArtifact:
        self.calls += 1
        if self._delay_s:
            await asyncio.sleep(self._delay_s)
        if self._error is not None:
            raise self._error
        return RawArtifact(buffer=self._buffer or b"", mime_type="image/png")


@pytest.fixture
def fake_provider() -> Callable[..., FakeProvider]:
    return FakeProvider


@pytest.fixture
def sample_prompt() -> str:
    """主题生成 prompt 测试数据"""
    return "Give me coloring page ideas"


def mock_http(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """基于 MockTransport 的 AsyncClient"""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def make_http() -> Callable[..., httpx.AsyncClient]:
    return mock_http
