"""LibraryBackend 抽象基类"""

from abc import ABC, abstractmethod

import httpx

from ..models import LibraryCandidate


class LibraryBackend(ABC):
    """外部图库后端

    search 抛出的异常由 LibraryResolver 捕获并记录，不影响其他后端。
    """

    name: str = "base"

    # 后端可接受的 MIME 类型
    accepted_mime_types: frozenset[str] = frozenset(
        {"image/png", "image/svg+xml", "image/jpeg", "image/webp"}
    )

    def __init__(self, http_client: httpx.AsyncClient, timeout_s: float = 10.0) -> None:
        self._http = http_client
        self.timeout_s = timeout_s

    @abstractmethod
    async def search(self, topic: str, category: str | None = None) -> list[LibraryCandidate]:
        """检索候选图片，无结果返回空列表"""

    def accepts(self, mime_type: str | None) -> bool:
        return mime_type in self.accepted_mime_types
