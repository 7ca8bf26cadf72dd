from fastapi import APIRouter
from storefront.api.routes import admin_products, catalog, inventory, pages, webhooks

page_router = APIRouter()
page_router.include_router(pages.router, tags=["Pages"])

api_router = APIRouter(prefix="/api")

api_router.include_router(webhooks.router, tags=["Webhooks"])
api_router.include_router(catalog.router, tags=["Catalog"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["Inventory"])
api_router.include_router(admin_products.router, prefix="/admin/products", tags=["Admin"])
