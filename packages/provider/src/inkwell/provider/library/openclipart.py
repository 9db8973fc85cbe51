"""OpenClipart 检索

公共 JSON 接口不稳定，默认不启用（INKWELL_LIBRARY_BACKENDS 中显式列出才启用）。
"""

from ..models import LibraryCandidate
from .base import LibraryBackend

OPENCLIPART_SEARCH_URL = "https://openclipart.org/search/json/"
SEARCH_LIMIT = 5


class OpenClipartBackend(LibraryBackend):
    name = "openclipart"

    async def search(self, topic: str, category: str | None = None) -> list[LibraryCandidate]:
        response = await self._http.get(
            OPENCLIPART_SEARCH_URL,
            params={"query": topic, "amount": SEARCH_LIMIT},
            timeout=self.timeout_s,
        )
        response.raise_for_status()
        # 接口失效时会重定向到首页 HTML
        if "json" not in response.headers.get("content-type", ""):
            return []

        candidates: list[LibraryCandidate] = []
        for item in response.json().get("payload") or []:
            svg = item.get("svg") or {}
            if url := svg.get("png_full_lossy"):
                mime_type = "image/png"
            elif url := svg.get("url"):
                mime_type = "image/svg+xml"
            else:
                continue
            candidates.append(
                LibraryCandidate(
                    url=url,
                    source_name=self.name,
                    title=item.get("title", ""),
                    source_page=item.get("detail_link"),
                    mime_type=mime_type,
                )
            )
        return candidates
