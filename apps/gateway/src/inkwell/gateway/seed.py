"""图库预热命令 -- python -m inkwell.gateway.seed [category ...]

不带参数时预热全部分类；echo 模式下不访问外部图库，预热不会写入任何条目。
"""

import asyncio
import sys

import httpx
import structlog
from inkwell.core.catalog import SEED_TOPICS
from inkwell.core.config import get_db_path, get_uploads_dir, load_storage_config
from inkwell.core.store import create_store_group
from inkwell.provider import build_library_resolver, load_provider_config

from .middleware.logging_config import setup_logging
from .services.persister import ArtifactPersister, select_backend
from .services.seed_service import LibrarySeeder, SeedReport

log = structlog.get_logger()


def main() -> None:
    """命令主入口"""
    categories = sys.argv[1:]
    unknown = [c for c in categories if c not in SEED_TOPICS]
    if unknown:
        print(f"未知分类: {', '.join(unknown)}")
        print(f"可用分类: {', '.join(SEED_TOPICS)}")
        sys.exit(1)

    setup_logging()
    topics = {c: SEED_TOPICS[c] for c in categories} if categories else None
    report = asyncio.run(run_seed(get_db_path(), topics))
    print(format_report(report))


async def run_seed(
    db_path: str,
    topics: dict[str, list[str]] | None = None,
    delay_s: float | None = None,
) -> SeedReport:
    """按当前配置组装图库检索与持久化，执行预热"""
    store_group = await create_store_group(db_path)
    provider_config = load_provider_config()
    if provider_config.generation_mode == "echo":
        log.warning("library_seed_echo_mode")

    try:
        async with httpx.AsyncClient() as http_client:
            seeder = LibrarySeeder(
                cache_store=store_group.cache_store,
                library_resolver=build_library_resolver(provider_config, http_client),
                persister=ArtifactPersister(
                    select_backend(load_storage_config(), get_uploads_dir()),
                    http_client=http_client,
                ),
                **({"delay_s": delay_s} if delay_s is not None else {}),
            )
            return await seeder.seed(topics)
    finally:
        await store_group.conn.close()


def format_report(report: SeedReport) -> str:
    """格式化预热结果"""
    lines = [
        f"新增: {len(report.added)}",
        f"已存在: {len(report.skipped)}",
        f"无结果: {len(report.no_results)}",
        f"失败: {len(report.failed)}",
    ]
    if report.failed:
        lines.append(f"失败主题: {', '.join(report.failed)}")
    return "\n".join(lines)


if __name__ == "__main__":
    main()
