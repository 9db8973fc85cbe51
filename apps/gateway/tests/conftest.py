"""apps/gateway 测试配置 -- 手动装配的服务实例 + httpx AsyncClient"""

import random
from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from inkwell.core.store import StoreGroup, create_store_group
from inkwell.gateway.services.birthday_service import BirthdayService
from inkwell.gateway.services.keyword_service import KeywordService
from inkwell.gateway.services.pack_service import PackGenerator
from inkwell.gateway.services.persister import ArtifactPersister, LocalStorageBackend
from inkwell.gateway.services.rate_limiter import RateLimiter
from inkwell.gateway.services.resolution_service import ResolutionService
from inkwell.provider import LibraryResolver, ProviderChain
from inkwell.provider.base import ImageProvider
from inkwell.provider.exceptions import ProviderError
from inkwell.provider.models import RawArtifact


class StaticProvider(ImageProvider):
    """返回固定图片的 provider；topic 命中 fail_on 时失败"""

    def __init__(
        self,
        buffer: bytes,
        name: str = "static",
        priority: int = 10,
        fail_on: set[str] | None = None,
        always_fail: bool = False,
    ) -> None:
        super().__init__(None, priority, 5.0)
        self.name = name
        self._buffer = buffer
        self._fail_on = fail_on or set()
        self._always_fail = always_fail
        self.prompts: list[str] = []

    async def attempt(self, prompt: str) -> RawArtifact:
        self.prompts.append(prompt)
        if self._always_fail or any(f", {topic}," in prompt for topic in self._fail_on):
            raise ProviderError(f"{self.name} unavailable")
        return RawArtifact(buffer=self._buffer, mime_type="image/png")


class FakeClock:
    """可手动推进的单调时钟"""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def provider_factory() -> type[StaticProvider]:
    return StaticProvider


@pytest.fixture
def static_provider(png_bytes) -> StaticProvider:
    return StaticProvider(png_bytes(48, 48))


@pytest.fixture
def provider_chain(static_provider) -> ProviderChain:
    return ProviderChain([static_provider])


@pytest.fixture
def library_resolver() -> LibraryResolver:
    """默认无候选的图库检索器，search 可被断言"""
    resolver = MagicMock(spec=LibraryResolver)
    resolver.search = AsyncMock(return_value=[])
    return resolver


@pytest.fixture
def persister(tmp_path: Path) -> ArtifactPersister:
    return ArtifactPersister(LocalStorageBackend(tmp_path / "uploads"))


@pytest_asyncio.fixture
async def store_group(tmp_path: Path) -> AsyncGenerator[StoreGroup, None]:
    group = await create_store_group(str(tmp_path / "sqlite" / "test.db"))
    yield group
    await group.conn.close()


@pytest.fixture
def rate_limiter(fake_clock) -> RateLimiter:
    return RateLimiter(window_s=3600, max_requests=10, clock=fake_clock)


@pytest.fixture
def resolution_service(
    store_group, library_resolver, provider_chain, persister, rate_limiter
) -> ResolutionService:
    return ResolutionService(
        cache_store=store_group.cache_store,
        library_resolver=library_resolver,
        provider_chain=provider_chain,
        persister=persister,
        rate_limiter=rate_limiter,
    )


@pytest.fixture
def pack_generator(store_group, provider_chain, persister) -> PackGenerator:
    return PackGenerator(
        pack_store=store_group.pack_store,
        provider_chain=provider_chain,
        persister=persister,
        keyword_service=KeywordService(None, size=5),
        size=5,
    )


@pytest.fixture
def birthday_service(store_group, provider_chain, persister, pack_generator) -> BirthdayService:
    return BirthdayService(
        keyword_store=store_group.birthday_store,
        keyword_service=KeywordService(None),
        provider_chain=provider_chain,
        persister=persister,
        pack_generator=pack_generator,
        rng=random.Random(7),
    )


@pytest_asyncio.fixture
async def app(
    tmp_path: Path,
    monkeypatch,
    store_group,
    library_resolver,
    provider_chain,
    persister,
    rate_limiter,
    resolution_service,
    pack_generator,
    birthday_service,
):
    """创建测试用 FastAPI app 实例（绕过 lifespan，手动装配 app.state）"""
    monkeypatch.setenv("INKWELL_UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")

    from inkwell.gateway.main import create_app

    application = create_app()
    application.state.store_group = store_group
    application.state.provider_chain = provider_chain
    application.state.library_resolver = library_resolver
    application.state.persister = persister
    application.state.rate_limiter = rate_limiter
    application.state.litellm_client = None
    application.state.resolution_service = resolution_service
    application.state.pack_generator = pack_generator
    application.state.birthday_service = birthday_service
    yield application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
