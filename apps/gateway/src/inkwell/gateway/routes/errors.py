"""错误响应 -- 统一 {"error": {"code", "message"}} 结构"""

from typing import Any

from starlette.responses import JSONResponse


def error_response(
    status_code: int,
    code: str,
    message: str,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    """构造错误响应，extra 字段并入 error 对象"""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message, **extra}},
        headers=headers,
    )
