"""Replicate -- 异步任务：创建 prediction 后按固定间隔轮询

总耗时受 ProviderChain 施加的 timeout_s 约束，轮询本身不设上限。
"""

import asyncio

import structlog

from ..base import ImageProvider
from ..exceptions import ProviderError
from ..models import RawArtifact

log = structlog.get_logger()

REPLICATE_PREDICTIONS_URL = (
    "https://api.replicate.com/v1/models/black-forest-labs/flux-schnell/predictions"
)

_FAILED_STATUSES = {"failed", "canceled"}


class ReplicateProvider(ImageProvider):
    name = "replicate"
    description = "Replicate (flux-schnell, async polling)"

    def __init__(
        self,
        http_client,
        priority: int,
        timeout_s: float,
        api_token: str = "",
        poll_interval_s: float = 2.0,
    ) -> None:
        super().__init__(http_client, priority, timeout_s)
        self._api_token = api_token.strip()
        self._poll_interval_s = poll_interval_s

    def is_configured(self) -> bool:
        return bool(self._api_token)

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_token}"}

    async def attempt(self, prompt: str) -> RawArtifact:
        response = await self._http.post(
            REPLICATE_PREDICTIONS_URL,
            headers=self._headers,
            json={
                "input": {
                    "prompt": prompt,
                    "aspect_ratio": "1:1",
                    "output_format": "png",
                    "num_outputs": 1,
                }
            },
        )
        response.raise_for_status()
        prediction = response.json()

        while prediction.get("status") != "succeeded":
            if prediction.get("status") in _FAILED_STATUSES:
                raise ProviderError(
                    f"Replicate prediction {prediction.get('status')}: {prediction.get('error')}"
                )
            poll_url = (prediction.get("urls") or {}).get("get")
            if not poll_url:
                raise ProviderError("Replicate 响应缺少轮询地址")

            await asyncio.sleep(self._poll_interval_s)
            response = await self._http.get(poll_url, headers=self._headers)
            response.raise_for_status()
            prediction = response.json()
            log.debug(
                "replicate_poll",
                prediction_id=prediction.get("id"),
                status=prediction.get("status"),
            )

        output = prediction.get("output")
        url = output[0] if isinstance(output, list) and output else output
        if not isinstance(url, str) or not url:
            raise ProviderError("Replicate 未返回图片")

        return RawArtifact(buffer=await self._download(url))
