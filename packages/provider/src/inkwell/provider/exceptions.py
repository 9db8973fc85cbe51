"""Provider 异常体系"""


class ProviderError(Exception):
    """Provider 包基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可通过重试或切换 provider 恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class InvalidArtifactError(ProviderError):
    """图片内容未通过校验（非图片、类型不支持、过小或头部损坏）"""


class LLMUnreachableError(ProviderError):
    """LiteLLM Proxy 不可达（连接失败、超时、DNS 解析失败等）"""

    def __init__(self, proxy_url: str, original_error: Exception) -> None:
        """
        Args:
            proxy_url: 尝试连接的 Proxy 地址
            original_error: 原始异常
        """
        super().__init__(
            f"LiteLLM Proxy 不可达: {proxy_url} -- {original_error}",
            recoverable=True,
        )
        self.proxy_url = proxy_url
        self.original_error = original_error


class ProviderExhaustedError(ProviderError):
    """所有已配置的 provider 都失败

    attempted 只包含实际尝试过的 provider（未配置的被跳过，不计入）。
    """

    def __init__(self, attempted: list[str], errors: dict[str, str] | None = None) -> None:
        tried = ", ".join(attempted) if attempted else "none"
        super().__init__(
            "All image generation providers are currently unavailable "
            f"(tried: {tried}). Please try again in a few moments.",
            recoverable=True,
        )
        self.attempted = list(attempted)
        self.errors = dict(errors or {})
