"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭、provider 链与图库检索构建、
存储后端选择、限流器启停、路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from inkwell.core.config import (
    get_db_path,
    get_rate_limit_max,
    get_rate_limit_sweep_s,
    get_rate_limit_window_s,
    get_uploads_dir,
    load_storage_config,
)
from inkwell.core.store import create_store_group
from inkwell.provider import (
    LiteLLMClient,
    ProviderChain,
    build_library_resolver,
    build_providers,
    load_provider_config,
)

from .middleware.client_mw import ClientIdMiddleware
from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .routes import (
    birthday,
    categories,
    gallery,
    generate,
    health,
    library,
    packs,
    providers,
)
from .services.birthday_service import BirthdayService
from .services.keyword_service import KeywordService
from .services.pack_service import PackGenerator
from .services.persister import ArtifactPersister, select_backend
from .services.rate_limiter import RateLimiter
from .services.resolution_service import ResolutionService

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时组装服务，关闭时按依赖逆序清理"""
    store_group = await create_store_group(get_db_path())
    app.state.store_group = store_group

    # 所有出站请求共享一个连接池
    http_client = httpx.AsyncClient()
    app.state.http_client = http_client

    provider_config = load_provider_config()
    app.state.provider_config = provider_config

    provider_chain = ProviderChain(build_providers(provider_config, http_client))
    library_resolver = build_library_resolver(provider_config, http_client)
    persister = ArtifactPersister(
        select_backend(load_storage_config(), get_uploads_dir()),
        http_client=http_client,
    )
    app.state.provider_chain = provider_chain
    app.state.library_resolver = library_resolver
    app.state.persister = persister

    rate_limiter = RateLimiter(
        window_s=get_rate_limit_window_s(),
        max_requests=get_rate_limit_max(),
        sweep_interval_s=get_rate_limit_sweep_s(),
    )
    rate_limiter.start()
    app.state.rate_limiter = rate_limiter

    if provider_config.keyword_mode == "litellm":
        litellm_client = LiteLLMClient(
            proxy_base_url=provider_config.proxy_base_url,
            proxy_api_key=provider_config.proxy_api_key.get_secret_value(),
            timeout_s=provider_config.llm_timeout_s,
            http_client=http_client,
        )
        log.info(
            "keyword_service_initialized",
            mode="litellm",
            proxy_url=provider_config.proxy_base_url,
        )
    else:
        litellm_client = None
        log.info("keyword_service_initialized", mode="static")
    # 保存 litellm_client 引用供健康检查使用
    app.state.litellm_client = litellm_client

    app.state.resolution_service = ResolutionService(
        cache_store=store_group.cache_store,
        library_resolver=library_resolver,
        provider_chain=provider_chain,
        persister=persister,
        rate_limiter=rate_limiter,
    )
    keyword_service = KeywordService(litellm_client)
    app.state.pack_generator = PackGenerator(
        pack_store=store_group.pack_store,
        provider_chain=provider_chain,
        persister=persister,
        keyword_service=keyword_service,
    )
    app.state.birthday_service = BirthdayService(
        keyword_store=store_group.birthday_store,
        keyword_service=keyword_service,
        provider_chain=provider_chain,
        persister=persister,
        pack_generator=app.state.pack_generator,
    )

    log.info(
        "gateway_started",
        generation_mode=provider_config.generation_mode,
        providers=[p.name for p in provider_chain.providers],
        storage=persister.backend.name,
    )

    yield

    await rate_limiter.stop()
    await app.state.pack_generator.wait_inflight()
    await http_client.aclose()
    await store_group.conn.close()
    log.info("gateway_stopped")


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="Inkwell Gateway",
        version="0.1.0",
        description="Inkwell 儿童涂色页生成 API",
        lifespan=lifespan,
    )

    # 注册中间件（先 ClientId 后 Logging，Logging 位于最外层）
    app.add_middleware(ClientIdMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging()
    setup_logfire()

    app.include_router(generate.router, tags=["generate"])
    app.include_router(gallery.router, tags=["gallery"])
    app.include_router(library.router, tags=["library"])
    app.include_router(categories.router, tags=["categories"])
    app.include_router(packs.router, tags=["packs"])
    app.include_router(birthday.router, tags=["birthday"])
    app.include_router(providers.router, tags=["providers"])
    app.include_router(health.router, tags=["health"])

    # 本地存储后端的图片；目录在 lifespan 中由 LocalStorageBackend 创建
    app.mount(
        "/uploads",
        StaticFiles(directory=str(get_uploads_dir()), check_dir=False),
        name="uploads",
    )

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
