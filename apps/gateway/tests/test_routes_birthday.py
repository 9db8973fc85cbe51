"""生日路由测试 -- 主题列表、单页生成、SSE 生日包"""

import json

import pytest
from httpx import AsyncClient
from inkwell.core.catalog import BIRTHDAY_FALLBACK_TOPICS, BIRTHDAY_THEMES
from inkwell.gateway.services.birthday_service import BirthdayService
from inkwell.gateway.services.keyword_service import KeywordService
from inkwell.provider import ProviderChain
from sse_starlette.sse import AppStatus


@pytest.fixture(autouse=True)
def reset_sse_app_status():
    AppStatus.should_exit_event = None


async def _read_sse(client: AsyncClient, url: str, params: dict) -> list[tuple[str, dict]]:
    events: list[tuple[str, dict]] = []
    event_name = "message"
    async with client.stream("GET", url, params=params) as response:
        assert response.status_code == 200
        async for line in response.aiter_lines():
            line = line.rstrip("\r")
            if line.startswith("event:"):
                event_name = line[len("event:"):].strip()
            elif line.startswith("data:"):
                events.append((event_name, json.loads(line[len("data:"):].strip())))
                event_name = "message"
    return events


class TestThemes:
    async def test_list_themes(self, client: AsyncClient):
        data = (await client.get("/api/birthday/themes")).json()
        assert [t["id"] for t in data["themes"]] == [t.id for t in BIRTHDAY_THEMES]
        assert data["themes"][0]["label"] == "Unicorn"


class TestGenerate:
    async def test_generate_single(self, client: AsyncClient):
        resp = await client.post(
            "/api/birthday/generate",
            json={"child_name": "Mia", "theme": "dinosaur", "age": 5, "message": "Roar!"},
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["topic"] in BIRTHDAY_FALLBACK_TOPICS["dinosaur"]
        assert data["child_name"] == "Mia"
        assert data["message"] == "Roar!"
        assert data["artifact_url"].startswith("/uploads/")

    async def test_missing_child_name(self, client: AsyncClient):
        resp = await client.post("/api/birthday/generate", json={"theme": "dinosaur"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_INPUT"

    async def test_age_out_of_range(self, client: AsyncClient):
        resp = await client.post(
            "/api/birthday/generate", json={"child_name": "Mia", "theme": "space", "age": 40}
        )
        assert resp.status_code == 422

    async def test_providers_exhausted(
        self, app, client: AsyncClient, store_group, persister, pack_generator,
        png_bytes, provider_factory,
    ):
        chain = ProviderChain([provider_factory(png_bytes(), name="fal", always_fail=True)])
        app.state.birthday_service = BirthdayService(
            store_group.birthday_store, KeywordService(None), chain, persister, pack_generator
        )

        resp = await client.post(
            "/api/birthday/generate", json={"child_name": "Mia", "theme": "space"}
        )

        assert resp.status_code == 502
        error = resp.json()["error"]
        assert error["code"] == "PROVIDERS_EXHAUSTED"
        assert error["attempted"] == ["fal"]


class TestPackStream:
    async def test_stream_birthday_pack(self, client: AsyncClient):
        events = await _read_sse(
            client,
            "/api/birthday/generate-pack-stream",
            {"child_name": "Mia", "theme": "mermaid", "age": 6},
        )

        names = [name for name, _ in events]
        assert names[0] == "status"
        assert events[0][1]["message"] == "Creating Mia's birthday pack..."
        assert names.count("item") == 6
        assert names[-1] == "complete"
        assert events[-1][1] == {"total": 6}
        topics = [data["image"]["topic"] for name, data in events if name == "item"]
        assert topics == BIRTHDAY_FALLBACK_TOPICS["mermaid"]

    async def test_invalid_request_rejected_before_stream(self, client: AsyncClient):
        resp = await client.get(
            "/api/birthday/generate-pack-stream", params={"child_name": "Mia"}
        )
        assert resp.status_code == 400
        assert resp.headers["content-type"].startswith("application/json")
        assert resp.json()["error"]["code"] == "INVALID_INPUT"
