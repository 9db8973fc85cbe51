"""PackGenerator -- 图片包流式批量生成

以异步生成器产出 PackEvent：status -> (progress -> item | item_error)* -> complete，
意外错误产出 fatal 后结束。单个主题失败不会中断批次。

取消语义：每个主题开始前检查调用方是否已断开，断开后不再启动新主题；
正在进行的主题在 shield 保护下继续完成并落库。
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import UTC, datetime
from functools import partial

import structlog
from inkwell.core.config import PACK_SIZE
from inkwell.core.models import BirthdayImage, Pack, PackEvent, PackImage
from inkwell.core.prompts import enhance_prompt
from inkwell.core.store.protocols import PackStore
from inkwell.provider import ProviderChain
from ulid import ULID

from .keyword_service import KeywordService
from .persister import ArtifactPersister

log = structlog.get_logger()

DisconnectCheck = Callable[[], Awaitable[bool]]
# (topic, index) -> 单页结果
ItemProducer = Callable[[str, int], Awaitable[PackImage | BirthdayImage]]


async def _never_disconnected() -> bool:
    return False


class PackGenerator:
    """图片包生成服务"""

    def __init__(
        self,
        pack_store: PackStore,
        provider_chain: ProviderChain,
        persister: ArtifactPersister,
        keyword_service: KeywordService,
        size: int = PACK_SIZE,
    ) -> None:
        self._pack_store = pack_store
        self._chain = provider_chain
        self._persister = persister
        self._keywords = keyword_service
        self.size = size
        # 持有进行中任务的强引用，避免消费方取消后任务被回收
        self._inflight: set[asyncio.Task] = set()

    async def stream_pack(
        self,
        pack: Pack,
        is_disconnected: DisconnectCheck | None = None,
    ) -> AsyncIterator[PackEvent]:
        """生成整个图片包；已存满的包直接回放已存储的单页"""
        try:
            cached = await self._pack_store.list_for_pack(pack.id)
            if len(cached) >= self.size:
                log.info("pack_replay_cached", pack_id=pack.id, count=len(cached))
                for image in cached:
                    yield PackEvent.item(image)
                yield PackEvent.complete(len(cached))
                return

            yield PackEvent.status("Generating ideas...")
            topics = await self._keywords.generate_pack_topics(pack)
        except Exception as e:
            log.error("pack_generation_fatal", pack_id=pack.id, error=str(e))
            yield PackEvent.fatal(str(e))
            return

        async for event in self.stream_topics(pack, topics, is_disconnected):
            yield event

    async def stream_topics(
        self,
        pack: Pack,
        topics: list[str],
        is_disconnected: DisconnectCheck | None = None,
    ) -> AsyncIterator[PackEvent]:
        """按顺序生成给定主题，逐个产出事件"""
        async for event in self.stream_items(
            topics,
            partial(self._generate_item, pack),
            is_disconnected,
            stream_id=pack.id,
        ):
            yield event

    async def stream_items(
        self,
        topics: list[str],
        produce: ItemProducer,
        is_disconnected: DisconnectCheck | None = None,
        *,
        stream_id: str,
        message: str = "Generating pages...",
    ) -> AsyncIterator[PackEvent]:
        """逐个主题调用 produce(topic, index)，产出 progress / item / item_error 事件

        图片包与生日包共用；进行中的任务登记在同一个集合里，关闭时统一等待。
        """
        check = is_disconnected or _never_disconnected
        total = len(topics)

        try:
            yield PackEvent.status(message, topics=list(topics), total=total)

            for index, topic in enumerate(topics):
                if await check():
                    log.info(
                        "pack_stream_client_disconnected",
                        stream_id=stream_id,
                        completed=index,
                        total=total,
                    )
                    return

                yield PackEvent.progress(index + 1, total, topic)

                task = asyncio.create_task(produce(topic, index))
                self._inflight.add(task)
                task.add_done_callback(self._inflight.discard)
                try:
                    image = await asyncio.shield(task)
                except Exception as e:
                    log.warning(
                        "pack_item_failed",
                        stream_id=stream_id,
                        topic=topic,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    yield PackEvent.item_error(topic, str(e))
                    continue

                yield PackEvent.item(image)

            yield PackEvent.complete(total)
        except Exception as e:
            log.error("pack_stream_fatal", stream_id=stream_id, error=str(e))
            yield PackEvent.fatal(str(e))

    async def wait_inflight(self) -> None:
        """等待所有进行中的单页任务结束（关闭时调用）"""
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    async def _generate_item(self, pack: Pack, topic: str, position: int) -> PackImage:
        prompt = enhance_prompt(topic, pack.category, pack.difficulty, pack.age_range)
        generated = await self._chain.generate(prompt)
        artifact = generated.artifact
        stored = await self._persister.store(artifact.buffer, artifact.mime_type)

        image = PackImage(
            id=str(ULID()),
            pack_id=pack.id,
            topic=topic,
            artifact_ref=stored.locator,
            artifact_url=stored.public_ref,
            prompt=prompt,
            difficulty=pack.difficulty,
            age_range=pack.age_range,
            category=pack.category,
            position=position,
            mime_type=stored.mime_type,
            provider=generated.provider,
            created_at=datetime.now(UTC),
        )
        await self._pack_store.insert(image)
        log.info("pack_item_generated", pack_id=pack.id, topic=topic, position=position)
        return image
