"""Wikimedia Commons 检索

先查 "<topic> clipart svg"，无结果再查 "<topic> svg"，
再逐个查询文件的 imageinfo（url + mime），单个文件失败不影响其他文件。
"""

import asyncio
from urllib.parse import quote

import structlog

from ..models import LibraryCandidate
from .base import LibraryBackend

log = structlog.get_logger()

WIKIMEDIA_API_URL = "https://commons.wikimedia.org/w/api.php"
WIKIMEDIA_HEADERS = {
    "User-Agent": "Inkwell/0.1 (kids coloring pages; contact via project repository) httpx",
}
SEARCH_LIMIT = 5


class WikimediaBackend(LibraryBackend):
    name = "wikimedia"
    # Commons 上的 JPEG 多为照片，不适合涂色
    accepted_mime_types = frozenset({"image/png", "image/svg+xml"})

    async def search(self, topic: str, category: str | None = None) -> list[LibraryCandidate]:
        titles = await self._search_titles(f"{topic} clipart svg")
        if not titles:
            titles = await self._search_titles(f"{topic} svg")

        results = await asyncio.gather(
            *(self._fetch_image_info(title) for title in titles),
            return_exceptions=True,
        )

        candidates: list[LibraryCandidate] = []
        for title, result in zip(titles, results, strict=True):
            if isinstance(result, Exception):
                log.debug("wikimedia_imageinfo_failed", title=title, error=str(result))
                continue
            if result is not None:
                candidates.append(result)
        return candidates

    async def _search_titles(self, query: str) -> list[str]:
        response = await self._http.get(
            WIKIMEDIA_API_URL,
            params={
                "action": "query",
                "list": "search",
                "srsearch": query,
                "srnamespace": 6,
                "srlimit": SEARCH_LIMIT,
                "format": "json",
                "origin": "*",
            },
            headers=WIKIMEDIA_HEADERS,
            timeout=self.timeout_s,
        )
        response.raise_for_status()
        results = (response.json().get("query") or {}).get("search") or []
        return [r["title"] for r in results if r.get("title")]

    async def _fetch_image_info(self, title: str) -> LibraryCandidate | None:
        response = await self._http.get(
            WIKIMEDIA_API_URL,
            params={
                "action": "query",
                "titles": title,
                "prop": "imageinfo",
                "iiprop": "url|mime",
                "format": "json",
                "origin": "*",
            },
            headers=WIKIMEDIA_HEADERS,
            timeout=self.timeout_s,
        )
        response.raise_for_status()
        pages = (response.json().get("query") or {}).get("pages") or {}
        page = next(iter(pages.values()), None)
        info = ((page or {}).get("imageinfo") or [None])[0]
        if not info or not self.accepts(info.get("mime")):
            return None

        return LibraryCandidate(
            url=info["url"],
            source_name=self.name,
            title=title.removeprefix("File:"),
            source_page=f"https://commons.wikimedia.org/wiki/{quote(title)}",
            mime_type=info.get("mime"),
        )
