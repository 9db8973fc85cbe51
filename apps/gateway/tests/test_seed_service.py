"""LibrarySeeder 测试 -- 跳过已缓存、无结果、下载失败、写入缓存；seed 命令"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import pytest_asyncio
from inkwell.core.keys import make_cache_key
from inkwell.core.models import SourceKind
from inkwell.gateway import seed as seed_cli
from inkwell.gateway.services.persister import ArtifactPersister, LocalStorageBackend
from inkwell.gateway.services.seed_service import LibrarySeeder, SeedReport
from inkwell.provider import LibraryCandidate


def _candidate(topic: str) -> LibraryCandidate:
    return LibraryCandidate(
        url=f"https://upload.example/{topic}.png",
        source_name="wikimedia",
        mime_type="image/png",
    )


@pytest_asyncio.fixture
async def download_persister(tmp_path: Path, png_bytes):
    """下载地址包含 broken 时返回 404"""

    def handler(request: httpx.Request) -> httpx.Response:
        if "broken" in request.url.path:
            return httpx.Response(404)
        return httpx.Response(200, content=png_bytes(64, 64))

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        yield ArtifactPersister(LocalStorageBackend(tmp_path / "uploads"), http_client=http)


@pytest.fixture
def seeder(store_group, library_resolver, download_persister) -> LibrarySeeder:
    library_resolver.search = AsyncMock(side_effect=lambda topic, category: [_candidate(topic)])
    return LibrarySeeder(
        store_group.cache_store, library_resolver, download_persister, delay_s=0
    )


class TestSeedTopic:
    async def test_adds_library_entry(self, seeder, store_group, library_resolver):
        assert await seeder.seed_topic("Lion", "animals") == "added"

        entry = await store_group.cache_store.lookup(make_cache_key("lion", "animals"))
        assert entry is not None
        assert entry.topic == "Lion"
        assert entry.source_kind == SourceKind.LIBRARY
        assert entry.provider is None
        assert entry.prompt == "library result for: Lion"
        assert entry.mime_type == "image/png"
        assert entry.width == 64
        library_resolver.search.assert_awaited_once_with("Lion", "animals")

    async def test_skips_cached_topic(self, seeder, library_resolver):
        await seeder.seed_topic("lion", "animals")
        library_resolver.search.reset_mock()

        assert await seeder.seed_topic("  LION ", "animals") == "skipped"
        library_resolver.search.assert_not_awaited()

    async def test_no_results(self, seeder, store_group, library_resolver):
        library_resolver.search = AsyncMock(return_value=[])

        assert await seeder.seed_topic("lion", "animals") == "no_results"
        assert (await store_group.cache_store.stats()).total_images == 0

    async def test_download_failure_recorded(self, seeder, store_group):
        assert await seeder.seed_topic("broken", "animals") == "failed"
        assert (await store_group.cache_store.stats()).total_images == 0


class TestSeed:
    async def test_report_covers_every_topic(self, seeder, library_resolver):
        await seeder.seed_topic("lion", "animals")
        library_resolver.search.reset_mock()

        report = await seeder.seed(
            {"animals": ["lion", "tiger", "broken"], "space": ["rocket"]}
        )

        assert report == SeedReport(
            added=["tiger", "rocket"],
            skipped=["lion"],
            failed=["broken"],
        )
        assert library_resolver.search.await_count == 3

    async def test_delay_between_searched_topics(
        self, store_group, library_resolver, download_persister
    ):
        library_resolver.search = AsyncMock(return_value=[])
        seeder = LibrarySeeder(
            store_group.cache_store, library_resolver, download_persister, delay_s=0.5
        )
        sleep = AsyncMock()
        with patch("inkwell.gateway.services.seed_service.asyncio.sleep", new=sleep):
            report = await seeder.seed({"animals": ["lion", "tiger"]})

        assert report.no_results == ["lion", "tiger"]
        assert sleep.call_count == 2
        sleep.assert_called_with(0.5)


class TestSeedCommand:
    def test_format_report(self):
        report = SeedReport(added=["lion"], failed=["tiger", "bear"])
        assert seed_cli.format_report(report) == (
            "新增: 1\n已存在: 0\n无结果: 0\n失败: 2\n失败主题: tiger, bear"
        )

    def test_unknown_category_exits(self, capsys):
        with patch.object(sys, "argv", ["seed", "dinosaurs"]), pytest.raises(SystemExit) as exc:
            seed_cli.main()
        assert exc.value.code == 1
        assert "未知分类: dinosaurs" in capsys.readouterr().out

    async def test_run_seed_echo_mode(self, tmp_path: Path, monkeypatch):
        """echo 模式不访问外部图库，所有主题均无结果"""
        monkeypatch.setenv("INKWELL_GENERATION_MODE", "echo")
        monkeypatch.setenv("INKWELL_UPLOADS_DIR", str(tmp_path / "uploads"))
        monkeypatch.delenv("R2_ACCOUNT_ID", raising=False)

        report = await seed_cli.run_seed(
            str(tmp_path / "seed.db"), {"space": ["rocket", "moon"]}, delay_s=0
        )

        assert report.no_results == ["rocket", "moon"]
        assert report.added == []
