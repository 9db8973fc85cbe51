"""LibraryResolver -- 并发检索所有图库后端

单个后端失败或超时只记录日志并排除，结果按后端顺序拼接，不去重不排序。
"""

import asyncio

import httpx
import structlog

from ..config import ProviderConfig
from ..models import LibraryCandidate
from .base import LibraryBackend
from .openclipart import OpenClipartBackend
from .wikimedia import WikimediaBackend

log = structlog.get_logger()

_BACKENDS: dict[str, type[LibraryBackend]] = {
    "wikimedia": WikimediaBackend,
    "openclipart": OpenClipartBackend,
}


class LibraryResolver:
    """图库检索器"""

    def __init__(self, backends: list[LibraryBackend]) -> None:
        self._backends = list(backends)

    @property
    def backends(self) -> list[LibraryBackend]:
        return list(self._backends)

    async def search(self, topic: str, category: str | None = None) -> list[LibraryCandidate]:
        """并发检索，返回所有成功后端的候选（可能为空）"""
        if not self._backends:
            return []

        results = await asyncio.gather(
            *(self._search_one(backend, topic, category) for backend in self._backends),
            return_exceptions=True,
        )

        candidates: list[LibraryCandidate] = []
        for backend, result in zip(self._backends, results, strict=True):
            if isinstance(result, BaseException):
                log.warning(
                    "library_backend_failed",
                    backend=backend.name,
                    error=str(result) or type(result).__name__,
                    error_type=type(result).__name__,
                )
                continue
            candidates.extend(result)

        log.info("library_search_completed", topic=topic, found=len(candidates))
        return candidates

    @staticmethod
    async def _search_one(
        backend: LibraryBackend,
        topic: str,
        category: str | None,
    ) -> list[LibraryCandidate]:
        return await asyncio.wait_for(backend.search(topic, category), timeout=backend.timeout_s)


def build_library_resolver(
    config: ProviderConfig,
    http_client: httpx.AsyncClient,
) -> LibraryResolver:
    """根据配置构建图库检索器（echo 模式不访问外部图库）"""
    if config.generation_mode == "echo":
        return LibraryResolver([])

    backends: list[LibraryBackend] = []
    for name in config.library_backends:
        backend_cls = _BACKENDS.get(name)
        if backend_cls is None:
            log.warning("unknown_library_backend", backend=name)
            continue
        backends.append(backend_cls(http_client, timeout_s=config.library_timeout_s))
    return LibraryResolver(backends)
