"""LibrarySeeder -- 用免费图库预热缓存

逐个主题：已缓存则跳过，否则检索图库、取首个候选下载持久化后写入缓存。
单个主题失败只记录，不中断批次；不调用生成链。
"""

import asyncio
from collections.abc import Iterable

import structlog
from inkwell.core.catalog import SEED_TOPICS
from inkwell.core.exceptions import PersistenceError
from inkwell.core.keys import make_cache_key
from inkwell.core.models import SourceKind
from inkwell.core.store.protocols import CacheStore
from inkwell.provider import LibraryResolver
from pydantic import BaseModel, Field

from .persister import ArtifactPersister
from .resolution_service import new_cache_entry

log = structlog.get_logger()

SEED_DELAY_S = 0.5


class SeedReport(BaseModel):
    """预热结果，各列表元素为主题"""

    added: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    no_results: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)


class LibrarySeeder:
    """图库预热"""

    def __init__(
        self,
        cache_store: CacheStore,
        library_resolver: LibraryResolver,
        persister: ArtifactPersister,
        delay_s: float = SEED_DELAY_S,
    ) -> None:
        self._cache_store = cache_store
        self._library = library_resolver
        self._persister = persister
        self._delay_s = delay_s

    async def seed(
        self, topics: dict[str, list[str]] | None = None
    ) -> SeedReport:
        """按分类预热，topics 缺省为目录中的预热主题"""
        report = SeedReport()
        for category, topic in _flatten(topics or SEED_TOPICS):
            outcome = await self.seed_topic(topic, category)
            getattr(report, outcome).append(topic)
            if outcome != "skipped" and self._delay_s > 0:
                # 图库站点限速
                await asyncio.sleep(self._delay_s)

        log.info(
            "library_seed_finished",
            added=len(report.added),
            skipped=len(report.skipped),
            no_results=len(report.no_results),
            failed=len(report.failed),
        )
        return report

    async def seed_topic(self, topic: str, category: str | None = None) -> str:
        """预热单个主题，返回 added / skipped / no_results / failed"""
        key = make_cache_key(topic, category)
        if await self._cache_store.lookup(key) is not None:
            log.debug("library_seed_skipped", topic=topic, category=category)
            return "skipped"

        candidates = await self._library.search(topic, category)
        if not candidates:
            log.info("library_seed_no_results", topic=topic, category=category)
            return "no_results"

        first = candidates[0]
        try:
            stored = await self._persister.download_and_store(first.url, first.mime_type)
        except PersistenceError as e:
            log.warning("library_seed_failed", topic=topic, url=first.url, error=str(e))
            return "failed"

        entry = await self._cache_store.insert(
            new_cache_entry(
                topic,
                category,
                key.topic_normalized,
                stored,
                prompt=f"library result for: {topic}",
                source_kind=SourceKind.LIBRARY,
                provider=None,
            )
        )
        log.info(
            "library_seed_added",
            topic=topic,
            category=category,
            source=first.source_name,
            entry_id=entry.id,
        )
        return "added"


def _flatten(topics: dict[str, list[str]]) -> Iterable[tuple[str, str]]:
    for category, names in topics.items():
        for name in names:
            yield category, name
