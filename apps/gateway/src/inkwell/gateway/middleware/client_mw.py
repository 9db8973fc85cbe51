"""ClientIdMiddleware -- 解析客户端标识

优先取 X-Forwarded-For 的第一跳，其次是连接对端地址，都没有时为 "unknown"。
结果写入 request.state.client_id 并绑定到 structlog contextvars，供限流使用。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

UNKNOWN_CLIENT = "unknown"


def resolve_client_id(request: Request) -> str:
    """从请求中解析客户端标识"""
    forwarded = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


class ClientIdMiddleware(BaseHTTPMiddleware):
    """为每个请求解析并绑定 client_id"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        client_id = resolve_client_id(request)
        request.state.client_id = client_id
        structlog.contextvars.bind_contextvars(client_id=client_id)
        return await call_next(request)
