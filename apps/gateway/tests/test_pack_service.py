"""PackGenerator 测试 -- 事件顺序、单页失败隔离、断开后停止、已缓存回放"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from inkwell.core.catalog import get_pack
from inkwell.core.models import PackEventType
from inkwell.core.store import SqlitePackStore
from inkwell.gateway.services.keyword_service import KeywordService
from inkwell.gateway.services.pack_service import PackGenerator
from inkwell.provider import ProviderChain

TOPICS = ["clownfish", "whale", "turtle", "octopus", "crab"]


async def _collect(stream) -> list:
    return [event async for event in stream]


def _types(events) -> list[PackEventType]:
    return [event.type for event in events]


class TestStreamTopics:
    async def test_failed_item_does_not_stop_batch(
        self, store_group, persister, png_bytes, provider_factory
    ):
        """5 个主题中第 3 个失败：4 个 item + 1 个 item_error，complete.total 为 5"""
        chain = ProviderChain([provider_factory(png_bytes(), fail_on={"turtle"})])
        generator = PackGenerator(
            store_group.pack_store, chain, persister, KeywordService(None, size=5), size=5
        )
        pack = get_pack("ocean-adventure")

        events = await _collect(generator.stream_topics(pack, TOPICS))

        types = _types(events)
        assert types[0] == PackEventType.STATUS
        assert events[0].data["topics"] == TOPICS
        assert types.count(PackEventType.PROGRESS) == 5
        assert types.count(PackEventType.ITEM) == 4
        assert types.count(PackEventType.ITEM_ERROR) == 1
        assert types[-1] == PackEventType.COMPLETE
        assert events[-1].data == {"total": 5}

        error = next(e for e in events if e.type == PackEventType.ITEM_ERROR)
        assert error.data["topic"] == "turtle"

        stored = await store_group.pack_store.list_for_pack(pack.id)
        assert [img.position for img in stored] == [0, 1, 3, 4]
        assert all(img.difficulty == pack.difficulty for img in stored)

    async def test_progress_precedes_item(self, pack_generator):
        pack = get_pack("ocean-adventure")
        events = await _collect(pack_generator.stream_topics(pack, TOPICS[:2]))
        assert _types(events) == [
            PackEventType.STATUS,
            PackEventType.PROGRESS,
            PackEventType.ITEM,
            PackEventType.PROGRESS,
            PackEventType.ITEM,
            PackEventType.COMPLETE,
        ]
        assert events[1].data == {"current": 1, "total": 2, "topic": "clownfish"}
        assert events[2].data["image"]["topic"] == "clownfish"

    async def test_disconnect_stops_new_topics(self, pack_generator, store_group):
        """断开后不再启动新主题，也不发送 complete"""
        pack = get_pack("ocean-adventure")
        checks = {"count": 0}

        async def is_disconnected() -> bool:
            checks["count"] += 1
            return checks["count"] > 2

        events = await _collect(pack_generator.stream_topics(pack, TOPICS, is_disconnected))

        assert _types(events).count(PackEventType.ITEM) == 2
        assert PackEventType.COMPLETE not in _types(events)
        assert await store_group.pack_store.count_for_pack(pack.id) == 2

    async def test_consumer_cancel_lets_inflight_finish(
        self, store_group, persister, png_bytes, provider_factory
    ):
        """消费方在单页生成期间取消，该单页仍然落库"""
        started = asyncio.Event()
        release = asyncio.Event()
        provider = provider_factory(png_bytes())
        original = provider.attempt

        async def slow_attempt(prompt: str):
            started.set()
            await release.wait()
            return await original(prompt)

        provider.attempt = slow_attempt
        generator = PackGenerator(
            store_group.pack_store,
            ProviderChain([provider]),
            persister,
            KeywordService(None, size=5),
            size=5,
        )
        pack = get_pack("ocean-adventure")

        consumer = asyncio.create_task(_collect(generator.stream_topics(pack, TOPICS)))
        await started.wait()
        consumer.cancel()
        with pytest.raises(asyncio.CancelledError):
            await consumer
        release.set()
        await generator.wait_inflight()

        assert await store_group.pack_store.count_for_pack(pack.id) == 1


class TestStreamPack:
    async def test_generates_with_fallback_topics(self, pack_generator, store_group):
        pack = get_pack("ocean-adventure")
        events = await _collect(pack_generator.stream_pack(pack))

        assert events[0].type == PackEventType.STATUS
        assert events[0].data["message"] == "Generating ideas..."
        assert events[-1].data == {"total": 5}
        assert await store_group.pack_store.count_for_pack(pack.id) == 5

    async def test_full_pack_replayed(self, pack_generator, static_provider):
        """已存满的包直接回放，不再生成"""
        pack = get_pack("ocean-adventure")
        await _collect(pack_generator.stream_pack(pack))
        generated = len(static_provider.prompts)

        events = await _collect(pack_generator.stream_pack(pack))

        assert _types(events) == [PackEventType.ITEM] * 5 + [PackEventType.COMPLETE]
        assert len(static_provider.prompts) == generated

    async def test_store_failure_yields_fatal(self, provider_chain, persister):
        pack_store = MagicMock(spec=SqlitePackStore)
        pack_store.list_for_pack = AsyncMock(side_effect=RuntimeError("database is locked"))
        generator = PackGenerator(
            pack_store, provider_chain, persister, KeywordService(None, size=5), size=5
        )

        events = await _collect(generator.stream_pack(get_pack("ocean-adventure")))

        assert _types(events) == [PackEventType.FATAL]
