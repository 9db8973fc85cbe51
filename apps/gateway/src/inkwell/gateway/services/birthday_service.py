"""BirthdayService -- 生日包

主题按 (theme, age) 缓存：缓存 -> LLM -> 静态列表。只有 LLM 生成的列表写入缓存，
LLM 恢复后未缓存的组合会重新询问。
生成的图片只做持久化，不进入图库缓存。
"""

import random
from collections.abc import AsyncIterator
from datetime import UTC, datetime

import structlog
from inkwell.core.catalog import birthday_fallback_topics, get_birthday_theme
from inkwell.core.exceptions import InvalidInputError
from inkwell.core.models import BirthdayImage, BirthdayRequest, PackEvent
from inkwell.core.prompts import birthday_prompt
from inkwell.core.store.protocols import BirthdayKeywordStore
from inkwell.provider import ProviderChain
from ulid import ULID

from .keyword_service import KeywordService
from .pack_service import DisconnectCheck, PackGenerator
from .persister import ArtifactPersister

log = structlog.get_logger()


def validate_birthday_request(request: BirthdayRequest) -> BirthdayRequest:
    """child_name 与 theme 必填，返回去除首尾空白后的请求

    Raises:
        InvalidInputError: 缺少 child_name 或 theme
    """
    child_name = request.child_name.strip()
    theme = request.theme.strip()
    if not child_name or not theme:
        raise InvalidInputError("child_name 和 theme 为必填项")
    return request.model_copy(update={"child_name": child_name, "theme": theme})


class BirthdayService:
    """生日单页与生日包生成"""

    def __init__(
        self,
        keyword_store: BirthdayKeywordStore,
        keyword_service: KeywordService,
        provider_chain: ProviderChain,
        persister: ArtifactPersister,
        pack_generator: PackGenerator,
        rng: random.Random | None = None,
    ) -> None:
        self._keyword_store = keyword_store
        self._keywords = keyword_service
        self._chain = provider_chain
        self._persister = persister
        self._packs = pack_generator
        self._rng = rng or random.Random()

    async def get_topics(self, request: BirthdayRequest) -> list[str]:
        """生日包主题列表，从不为空"""
        cached = await self._keyword_store.get(request.theme, request.age)
        if cached:
            log.debug("birthday_topics_cache_hit", theme=request.theme, age=request.age)
            return cached

        label = request.theme_label
        if not label:
            theme = get_birthday_theme(request.theme)
            label = theme.label if theme else request.theme

        topics = await self._keywords.suggest_birthday_topics(label, request.age)
        if topics:
            await self._keyword_store.put(request.theme, request.age, topics)
            return topics
        return birthday_fallback_topics(request.theme)

    async def generate_single(self, request: BirthdayRequest) -> BirthdayImage:
        """随机挑选一个主题生成单页

        Raises:
            InvalidInputError: 缺少 child_name 或 theme
            ProviderExhaustedError: 所有 provider 都失败
            PersistenceError: 图片无法持久化
        """
        request = validate_birthday_request(request)
        topics = await self.get_topics(request)
        return await self._generate_image(request, self._rng.choice(topics))

    async def stream_pack(
        self,
        request: BirthdayRequest,
        is_disconnected: DisconnectCheck | None = None,
    ) -> AsyncIterator[PackEvent]:
        """生日包流式生成，事件与图片包相同

        调用方应先用 validate_birthday_request 校验请求。
        """
        stream_id = f"birthday:{request.theme}"
        try:
            yield PackEvent.status(f"Creating {request.child_name}'s birthday pack...")
            topics = await self.get_topics(request)
        except Exception as e:
            log.error("birthday_pack_fatal", theme=request.theme, error=str(e))
            yield PackEvent.fatal(str(e))
            return

        async def produce(topic: str, index: int) -> BirthdayImage:
            return await self._generate_image(request, topic)

        async for event in self._packs.stream_items(
            topics,
            produce,
            is_disconnected,
            stream_id=stream_id,
            message=f"Generating {len(topics)} birthday pages...",
        ):
            yield event

    async def _generate_image(self, request: BirthdayRequest, topic: str) -> BirthdayImage:
        prompt = birthday_prompt(topic, request.age)
        generated = await self._chain.generate(prompt)
        artifact = generated.artifact
        stored = await self._persister.store(artifact.buffer, artifact.mime_type)
        log.info(
            "birthday_image_generated",
            theme=request.theme,
            topic=topic,
            provider=generated.provider,
        )
        return BirthdayImage(
            id=str(ULID()),
            topic=topic,
            artifact_url=stored.public_ref,
            prompt=prompt,
            child_name=request.child_name,
            age=request.age,
            theme=request.theme,
            message=request.message,
            mime_type=stored.mime_type,
            provider=generated.provider,
            created_at=datetime.now(UTC),
        )
