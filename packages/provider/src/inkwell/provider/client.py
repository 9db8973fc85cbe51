"""LiteLLMClient -- 经 LiteLLM Proxy 获取图片包主题

只做单轮文本补全：一段 user prompt 进，一段文本出。
解析（JSON 数组提取）由调用方负责。
"""

import time

import httpx
import structlog
from litellm import acompletion

from .exceptions import LLMUnreachableError, ProviderError

log = structlog.get_logger()

HEALTH_CHECK_TIMEOUT_S = 5.0

# litellm 自身的连接类异常只能按名称识别
_UNREACHABLE_NAMES = frozenset({"APIConnectionError", "APITimeoutError", "Timeout"})


def is_unreachable(error: Exception) -> bool:
    """异常是否意味着 Proxy 不可达"""
    if isinstance(error, (OSError, TimeoutError, httpx.TransportError)):
        return True
    return type(error).__name__ in _UNREACHABLE_NAMES


class LiteLLMClient:
    """LiteLLM Proxy 客户端"""

    def __init__(
        self,
        proxy_base_url: str = "http://localhost:4000",
        proxy_api_key: str = "",
        timeout_s: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            proxy_base_url: Proxy 地址
            proxy_api_key: Proxy 访问密钥，空串表示 Proxy 未开启鉴权
            timeout_s: 单次补全超时（秒）
            http_client: 健康检查使用的共享连接池，None 时临时创建
        """
        self.proxy_base_url = proxy_base_url.rstrip("/")
        self._api_key = proxy_api_key or "no-key"
        self._timeout_s = timeout_s
        self._http = http_client

    async def complete(
        self,
        prompt: str,
        model_alias: str = "cheap",
        temperature: float = 0.9,
        max_tokens: int | None = None,
    ) -> str:
        """单轮补全，返回响应文本（可能为空串）

        Raises:
            LLMUnreachableError: Proxy 连接失败或超时
            ProviderError: Proxy 返回错误
        """
        options = {"max_tokens": max_tokens} if max_tokens is not None else {}
        started = time.monotonic()
        try:
            response = await acompletion(
                model=model_alias,
                messages=[{"role": "user", "content": prompt}],
                api_base=self.proxy_base_url,
                api_key=self._api_key,
                temperature=temperature,
                timeout=self._timeout_s,
                **options,
            )
        except Exception as e:
            log.warning(
                "keyword_llm_call_failed",
                model_alias=model_alias,
                error=str(e),
                error_type=type(e).__name__,
            )
            if is_unreachable(e):
                raise LLMUnreachableError(self.proxy_base_url, e) from e
            raise ProviderError(f"LLM 调用失败: {e}") from e

        text = response.choices[0].message.content or ""
        log.info(
            "keyword_llm_call_completed",
            model_alias=model_alias,
            model_name=getattr(response, "model", ""),
            duration_ms=int((time.monotonic() - started) * 1000),
            chars=len(text),
        )
        return text

    async def health_check(self) -> bool:
        """GET {proxy}/health/liveliness，不抛出异常"""
        url = f"{self.proxy_base_url}/health/liveliness"
        try:
            if self._http is not None:
                resp = await self._http.get(url, timeout=HEALTH_CHECK_TIMEOUT_S)
            else:
                async with httpx.AsyncClient() as http:
                    resp = await http.get(url, timeout=HEALTH_CHECK_TIMEOUT_S)
        except httpx.HTTPError as e:
            log.debug("litellm_health_check_failed", url=url, error=str(e))
            return False
        return resp.status_code == 200
