"""POST /api/generate 路由测试"""

from httpx import AsyncClient
from inkwell.core.models import SourceKind
from inkwell.gateway.services.rate_limiter import RateLimiter
from inkwell.gateway.services.resolution_service import ResolutionService
from inkwell.provider import ProviderChain


class TestGenerate:
    async def test_generate_then_cache(self, client: AsyncClient):
        resp = await client.post(
            "/api/generate", json={"topic": "Happy Whale", "category": "animals"}
        )
        assert resp.status_code == 200
        first = resp.json()
        assert first["from_cache"] is False
        assert first["source_kind"] == SourceKind.GENERATED.value
        assert first["provider_used"] == "static"
        assert first["artifact_url"].startswith("/uploads/")
        assert first["resolution_path"] == [
            "CACHE_CHECK",
            "LIBRARY_SEARCH",
            "GENERATE",
            "PERSIST",
            "DONE",
        ]

        resp = await client.post(
            "/api/generate", json={"topic": "happy   whale", "category": "animals"}
        )
        second = resp.json()
        assert second["id"] == first["id"]
        assert second["from_cache"] is True

    async def test_generated_file_served(self, client: AsyncClient):
        resp = await client.post("/api/generate", json={"topic": "kite"})
        image = await client.get(resp.json()["artifact_url"])
        assert image.status_code == 200
        assert image.content.startswith(b"\x89PNG")

    async def test_invalid_topic(self, client: AsyncClient):
        resp = await client.post("/api/generate", json={"topic": "   "})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_INPUT"

        resp = await client.post("/api/generate", json={"topic": "x" * 101})
        assert resp.status_code == 400

    async def test_missing_topic_is_validation_error(self, client: AsyncClient):
        resp = await client.post("/api/generate", json={})
        assert resp.status_code == 422

    async def test_rate_limited(
        self, app, client: AsyncClient, store_group, library_resolver, provider_chain, persister,
        fake_clock,
    ):
        app.state.resolution_service = ResolutionService(
            store_group.cache_store,
            library_resolver,
            provider_chain,
            persister,
            RateLimiter(window_s=3600, max_requests=2, clock=fake_clock),
        )
        body = {"topic": "cat", "force_new": True}
        headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}

        for _ in range(2):
            resp = await client.post("/api/generate", json=body, headers=headers)
            assert resp.status_code == 200

        resp = await client.post("/api/generate", json=body, headers=headers)
        assert resp.status_code == 429
        assert resp.headers["Retry-After"] == "3600"
        error = resp.json()["error"]
        assert error["code"] == "RATE_LIMITED"
        assert error["retry_after"] == 3600

        # 其他客户端不受影响
        other = await client.post(
            "/api/generate", json=body, headers={"X-Forwarded-For": "198.51.100.1"}
        )
        assert other.status_code == 200

    async def test_providers_exhausted(
        self, app, client: AsyncClient, store_group, library_resolver, persister, rate_limiter,
        png_bytes, provider_factory,
    ):
        chain = ProviderChain(
            [
                provider_factory(png_bytes(), name="pollinations", always_fail=True),
                provider_factory(png_bytes(), name="fal", priority=30, always_fail=True),
            ]
        )
        app.state.resolution_service = ResolutionService(
            store_group.cache_store, library_resolver, chain, persister, rate_limiter
        )

        resp = await client.post("/api/generate", json={"topic": "cat"})

        assert resp.status_code == 502
        error = resp.json()["error"]
        assert error["code"] == "PROVIDERS_EXHAUSTED"
        assert error["attempted"] == ["pollinations", "fal"]
        assert "tried: pollinations, fal" in error["message"]
