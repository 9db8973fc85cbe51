"""Pollinations.ai -- 免费、无需凭据的同步 GET 接口"""

import random
from urllib.parse import quote

from ..base import ImageProvider
from ..models import RawArtifact

POLLINATIONS_BASE_URL = "https://image.pollinations.ai/prompt"


class PollinationsProvider(ImageProvider):
    name = "pollinations"
    description = "Pollinations.ai (FLUX, free)"

    def build_url(self, prompt: str, seed: int | None = None) -> str:
        """构造带随机 seed 的请求地址"""
        if seed is None:
            seed = random.randint(0, 99999)
        return (
            f"{POLLINATIONS_BASE_URL}/{quote(prompt, safe='')}"
            f"?width=1024&height=1024&nologo=true&seed={seed}&model=flux"
        )

    async def attempt(self, prompt: str) -> RawArtifact:
        response = await self._http.get(self.build_url(prompt), timeout=self.timeout_s)
        response.raise_for_status()
        return RawArtifact(
            buffer=response.content,
            mime_type=response.headers.get("content-type"),
        )
