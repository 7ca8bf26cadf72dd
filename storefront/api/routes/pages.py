from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder

from storefront.api.deps import get_app_settings, get_page_cache
from storefront.cache.page_cache import PageCache
from storefront.config import Settings
from storefront.products.models import ProductFilters
from storefront.services import product_service
from storefront.services.revalidation_service import HOME_PATH, PRODUCTS_PATH, PRODUCTS_TAG, product_path

router = APIRouter()


@router.get("/")
async def home(cache: PageCache = Depends(get_page_cache)):
    async def render():
        return jsonable_encoder(await product_service.get_home_sections())

    return await cache.get_or_render(HOME_PATH, [PRODUCTS_TAG], render)


@router.get("/products")
async def product_listing(
    filters: ProductFilters = Depends(),
    cache: PageCache = Depends(get_page_cache),
    settings: Settings = Depends(get_app_settings),
):
    async def render():
        return jsonable_encoder(await product_service.get_products(filters, page_size=settings.PRODUCTS_PAGE_SIZE))

    # only the unfiltered first page is shared between visitors
    if not filters.is_empty():
        return await render()
    return await cache.get_or_render(PRODUCTS_PATH, [PRODUCTS_TAG], render)


@router.get("/products/{slug}")
async def product_detail(slug: str, cache: PageCache = Depends(get_page_cache)):
    async def render():
        product = await product_service.get_product_by_slug(slug)
        return jsonable_encoder(product) if product else None

    product = await cache.get_or_render(product_path(slug), [PRODUCTS_TAG], render)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
