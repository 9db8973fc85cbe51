"""ResolutionService -- 分层解析：限流 -> 缓存 -> 图库 -> 生成 -> 持久化

状态流转由 inkwell.core.models.VALID_TRANSITIONS 约束，每个状态至多进入一次。
- force_new: RATE_CHECK -> GENERATE -> PERSIST -> DONE（或 REJECTED / FAILED）
- 否则: CACHE_CHECK -> DONE | LIBRARY_SEARCH -> PERSIST | GENERATE -> PERSIST -> DONE
缓存条目只在图片持久化成功之后写入。
"""

from datetime import UTC, datetime

import structlog
from inkwell.core.exceptions import PersistenceError, RateLimitedError
from inkwell.core.keys import make_cache_key, validate_topic
from inkwell.core.models import (
    TERMINAL_STATES,
    CacheEntry,
    ResolutionRequest,
    ResolutionResult,
    ResolutionState,
    SourceKind,
    validate_transition,
)
from inkwell.core.prompts import enhance_prompt
from inkwell.core.store.protocols import CacheStore
from inkwell.provider import (
    InvalidArtifactError,
    LibraryResolver,
    ProviderChain,
    ProviderExhaustedError,
    inspect_artifact,
)
from ulid import ULID

from .persister import ArtifactPersister, PersistedArtifact
from .rate_limiter import RateLimiter

log = structlog.get_logger()


def new_cache_entry(
    topic: str,
    category: str | None,
    topic_normalized: str,
    stored: PersistedArtifact,
    *,
    prompt: str,
    source_kind: SourceKind,
    provider: str | None,
) -> CacheEntry:
    """由已持久化的图片构造缓存条目"""
    return CacheEntry(
        id=str(ULID()),
        topic=topic,
        topic_normalized=topic_normalized,
        category=category,
        prompt=prompt,
        artifact_ref=stored.locator,
        artifact_url=stored.public_ref,
        mime_type=stored.mime_type,
        file_size=stored.size,
        width=stored.width,
        height=stored.height,
        source_kind=source_kind,
        provider=provider,
        created_at=datetime.now(UTC),
    )


class ResolutionTrace:
    """单次解析的状态轨迹"""

    def __init__(self, initial: ResolutionState) -> None:
        self.state = initial
        self.path: list[ResolutionState] = [initial]

    def advance(self, to_state: ResolutionState) -> None:
        if not validate_transition(self.state, to_state):
            raise RuntimeError(f"非法状态流转: {self.state} -> {to_state}")
        log.debug("resolution_transition", from_state=self.state, to_state=to_state)
        self.state = to_state
        self.path.append(to_state)
        if self.finished:
            log.debug("resolution_finished", state=to_state, path=[s.value for s in self.path])

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES


class ResolutionService:
    """分层解析编排

    不持有请求级共享状态，可被多个请求并发调用。
    """

    def __init__(
        self,
        cache_store: CacheStore,
        library_resolver: LibraryResolver,
        provider_chain: ProviderChain,
        persister: ArtifactPersister,
        rate_limiter: RateLimiter,
    ) -> None:
        self._cache_store = cache_store
        self._library = library_resolver
        self._chain = provider_chain
        self._persister = persister
        self._rate_limiter = rate_limiter

    async def resolve(self, request: ResolutionRequest) -> ResolutionResult:
        """解析一次请求

        Raises:
            InvalidInputError: topic 非法（任何层级执行之前）
            RateLimitedError: force_new 且客户端超出窗口配额
            ProviderExhaustedError: 所有已配置 provider 都失败
            PersistenceError: 图片无法持久化
        """
        topic = validate_topic(request.topic)
        category = request.category or None
        key = make_cache_key(topic, category)

        if request.force_new:
            trace = ResolutionTrace(ResolutionState.RATE_CHECK)
            if not await self._rate_limiter.admit(request.client_id):
                trace.advance(ResolutionState.REJECTED)
                raise RateLimitedError(request.client_id, self._rate_limiter.retry_after_s)
            trace.advance(ResolutionState.GENERATE)
            return await self._generate(topic, category, key.topic_normalized, trace)

        trace = ResolutionTrace(ResolutionState.CACHE_CHECK)
        cached = await self._cache_store.lookup(key)
        if cached is not None:
            trace.advance(ResolutionState.DONE)
            log.info("resolution_cache_hit", cache_key=str(key), entry_id=cached.id)
            return ResolutionResult.from_entry(
                cached,
                from_cache=True,
                from_library=cached.source_kind == SourceKind.LIBRARY,
                resolution_path=trace.path,
            )

        trace.advance(ResolutionState.LIBRARY_SEARCH)
        candidates = await self._library.search(topic, category)
        if candidates:
            first = candidates[0]
            try:
                buffer = await self._persister.download(first.url)
                inspect_artifact(buffer)
            except (PersistenceError, InvalidArtifactError) as e:
                log.warning("library_candidate_download_failed", url=first.url, error=str(e))
            else:
                trace.advance(ResolutionState.PERSIST)
                stored = await self._persist(buffer, trace, mime_type=first.mime_type)
                entry = await self._insert(
                    topic,
                    category,
                    key.topic_normalized,
                    stored,
                    prompt="",
                    source_kind=SourceKind.LIBRARY,
                    provider=None,
                )
                trace.advance(ResolutionState.DONE)
                log.info(
                    "resolution_library_hit",
                    cache_key=str(key),
                    source=first.source_name,
                    entry_id=entry.id,
                )
                return ResolutionResult.from_entry(
                    entry,
                    from_library=True,
                    resolution_path=trace.path,
                )

        trace.advance(ResolutionState.GENERATE)
        return await self._generate(topic, category, key.topic_normalized, trace)

    async def _generate(
        self,
        topic: str,
        category: str | None,
        topic_normalized: str,
        trace: ResolutionTrace,
    ) -> ResolutionResult:
        prompt = enhance_prompt(topic, category)
        try:
            generated = await self._chain.generate(prompt)
        except ProviderExhaustedError:
            trace.advance(ResolutionState.FAILED)
            raise

        trace.advance(ResolutionState.PERSIST)
        stored = await self._persist(
            generated.artifact.buffer, trace, mime_type=generated.artifact.mime_type
        )
        entry = await self._insert(
            topic,
            category,
            topic_normalized,
            stored,
            prompt=prompt,
            source_kind=SourceKind.GENERATED,
            provider=generated.provider,
        )
        trace.advance(ResolutionState.DONE)
        log.info(
            "resolution_generated",
            topic=topic_normalized,
            provider=generated.provider,
            attempted=generated.attempted,
            entry_id=entry.id,
        )
        return ResolutionResult.from_entry(entry, resolution_path=trace.path)

    async def _persist(
        self,
        buffer: bytes,
        trace: ResolutionTrace,
        mime_type: str | None = None,
    ) -> PersistedArtifact:
        try:
            return await self._persister.store(buffer, mime_type)
        except PersistenceError:
            trace.advance(ResolutionState.FAILED)
            raise

    async def _insert(
        self,
        topic: str,
        category: str | None,
        topic_normalized: str,
        stored: PersistedArtifact,
        *,
        prompt: str,
        source_kind: SourceKind,
        provider: str | None,
    ) -> CacheEntry:
        entry = new_cache_entry(
            topic,
            category,
            topic_normalized,
            stored,
            prompt=prompt,
            source_kind=source_kind,
            provider=provider,
        )
        return await self._cache_store.insert(entry)
