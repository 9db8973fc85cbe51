"""fal.ai -- 同步接口返回 JSON 图片链接，再下载"""

from ..base import ImageProvider
from ..exceptions import ProviderError
from ..models import RawArtifact

FAL_API_URL = "https://fal.run/fal-ai/flux/schnell"


class FalProvider(ImageProvider):
    name = "fal"
    description = "fal.ai (FLUX schnell)"

    def __init__(self, http_client, priority: int, timeout_s: float, api_key: str = "") -> None:
        super().__init__(http_client, priority, timeout_s)
        self._api_key = api_key.strip()

    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def attempt(self, prompt: str) -> RawArtifact:
        response = await self._http.post(
            FAL_API_URL,
            headers={"Authorization": f"Key {self._api_key}"},
            json={
                "prompt": prompt,
                "image_size": "square",
                "num_inference_steps": 4,
                "num_images": 1,
            },
            timeout=self.timeout_s,
        )
        response.raise_for_status()
        images = response.json().get("images") or []
        if not images or not images[0].get("url"):
            raise ProviderError("fal.ai 未返回图片")

        image = images[0]
        buffer = await self._download(image["url"])
        return RawArtifact(buffer=buffer, mime_type=image.get("content_type"))
