"""依赖注入模块 -- 通过 FastAPI Depends 注入服务实例

实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Request
from inkwell.core.store import StoreGroup
from inkwell.provider import LibraryResolver, ProviderChain

from .middleware.client_mw import resolve_client_id
from .services.birthday_service import BirthdayService
from .services.pack_service import PackGenerator
from .services.resolution_service import ResolutionService


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_resolution_service(request: Request) -> ResolutionService:
    """从 app.state 获取 ResolutionService 实例"""
    return request.app.state.resolution_service


def get_pack_generator(request: Request) -> PackGenerator:
    """从 app.state 获取 PackGenerator 实例"""
    return request.app.state.pack_generator


def get_provider_chain(request: Request) -> ProviderChain:
    """从 app.state 获取 ProviderChain 实例"""
    return request.app.state.provider_chain


def get_library_resolver(request: Request) -> LibraryResolver:
    """从 app.state 获取 LibraryResolver 实例"""
    return request.app.state.library_resolver


def get_client_id(request: Request) -> str:
    """ClientIdMiddleware 已解析时直接复用，否则现场解析"""
    return getattr(request.state, "client_id", None) or resolve_client_id(request)


def get_birthday_service(request: Request) -> BirthdayService:
    """从 app.state 获取 BirthdayService 实例"""
    return request.app.state.birthday_service
