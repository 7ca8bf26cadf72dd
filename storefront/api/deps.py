from fastapi import Request

from storefront.cache.page_cache import PageCache
from storefront.config import Settings
from storefront.services.revalidation_forwarder import RevalidationForwarder
from storefront.services.revalidation_service import RevalidationDispatcher


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_page_cache(request: Request) -> PageCache:
    return request.app.state.page_cache


def get_dispatcher(request: Request) -> RevalidationDispatcher:
    return request.app.state.dispatcher


def get_forwarder(request: Request) -> RevalidationForwarder:
    return request.app.state.forwarder
