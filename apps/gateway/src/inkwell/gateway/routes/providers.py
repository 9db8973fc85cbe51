"""Provider 状态路由

GET /api/providers/status: provider 顺序、超时与配置状态。
"""

from fastapi import APIRouter, Depends
from inkwell.provider import ProviderChain

from ..deps import get_provider_chain

router = APIRouter()


@router.get("/api/providers/status")
async def providers_status(chain: ProviderChain = Depends(get_provider_chain)):
    statuses = chain.status()
    return {
        "providers": statuses,
        "configured_count": sum(1 for s in statuses if s.configured),
    }
