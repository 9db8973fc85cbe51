"""Core 异常体系

请求校验、限流、持久化三类错误。Provider 相关异常见 inkwell.provider.exceptions。
"""


class InkwellError(Exception):
    """Inkwell 基础异常"""

    def __init__(self, message: str, recoverable: bool = False) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 调用方重试是否可能成功
        """
        super().__init__(message)
        self.recoverable = recoverable


class InvalidInputError(InkwellError):
    """请求参数非法（主题为空、过长或类型错误）

    在任何解析层级执行之前抛出。
    """


class RateLimitedError(InkwellError):
    """客户端在滑动窗口内的强制生成次数已达上限"""

    def __init__(self, client_id: str, retry_after_s: int) -> None:
        super().__init__(
            f"客户端 {client_id} 生成次数已达上限，请 {retry_after_s} 秒后重试",
            recoverable=True,
        )
        self.client_id = client_id
        self.retry_after_s = retry_after_s


class PersistenceError(InkwellError):
    """图片无法持久化（校验失败、下载失败、存储后端写入失败）"""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message, recoverable=True)
        self.original_error = original_error
