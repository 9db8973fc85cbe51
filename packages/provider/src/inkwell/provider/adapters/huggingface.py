"""Hugging Face Inference -- FLUX.1-schnell，响应体即图片"""

from ..base import ImageProvider
from ..models import RawArtifact

HUGGING_FACE_API_URL = (
    "https://router.huggingface.co/hf-inference/models/black-forest-labs/FLUX.1-schnell"
)


class HuggingFaceProvider(ImageProvider):
    name = "huggingface"
    description = "Hugging Face (FLUX.1-schnell)"

    def __init__(self, http_client, priority: int, timeout_s: float, api_token: str = "") -> None:
        super().__init__(http_client, priority, timeout_s)
        self._api_token = api_token.strip()

    def is_configured(self) -> bool:
        return bool(self._api_token)

    async def attempt(self, prompt: str) -> RawArtifact:
        response = await self._http.post(
            HUGGING_FACE_API_URL,
            headers={"Authorization": f"Bearer {self._api_token}"},
            json={
                "inputs": prompt,
                # FLUX.1-schnell 针对 4 步推理优化
                "parameters": {"width": 1024, "height": 1024, "num_inference_steps": 4},
            },
            timeout=self.timeout_s,
        )
        response.raise_for_status()
        return RawArtifact(
            buffer=response.content,
            mime_type=response.headers.get("content-type"),
        )
