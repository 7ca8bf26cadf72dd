import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from storefront.api.router import api_router, page_router
from storefront.cache.page_cache import PageCache
from storefront.config import Settings, get_settings
from storefront.services.revalidation_forwarder import RevalidationForwarder
from storefront.services.revalidation_service import RevalidationDispatcher


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    # Configure logging
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not settings.REVALIDATE_WEBHOOK_SECRET:
            logging.getLogger(__name__).error("REVALIDATE_WEBHOOK_SECRET not configured; revalidation is disabled")
        yield
        app.state.page_cache.clear()

    app = FastAPI(title="Furniture Storefront", lifespan=lifespan)

    page_cache = PageCache(ttl_seconds=settings.PAGE_CACHE_TTL_SECONDS)
    app.state.settings = settings
    app.state.page_cache = page_cache
    app.state.dispatcher = RevalidationDispatcher(settings.REVALIDATE_WEBHOOK_SECRET, page_cache)
    app.state.forwarder = RevalidationForwarder(settings)

    app.include_router(api_router)
    app.include_router(page_router)

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
