import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from storefront.products.models import WarehouseCreate, WarehouseStockEntry
from storefront.services import inventory_service
from storefront.services.inventory_service import upsert_warehouse_stock

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upsert")
async def upsert_inventory(request: Request):
    try:
        body = await request.json()
    except ValueError:
        body = None

    raw_entries = (body or {}).get("entries") if isinstance(body, dict) else None
    if not isinstance(raw_entries, list) or not raw_entries:
        return JSONResponse({"error": "No entries provided"}, status_code=400)

    try:
        entries = [WarehouseStockEntry.model_validate(e) for e in raw_entries]
    except ValidationError as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    try:
        await upsert_warehouse_stock(entries)
    except Exception as e:
        logger.exception("Inventory upsert failed: %s", e)
        return JSONResponse({"error": str(e) or "Unknown error"}, status_code=500)

    return JSONResponse({"ok": True})


@router.get("/warehouses")
async def list_warehouses():
    try:
        warehouses = await inventory_service.list_warehouses()
    except Exception as e:
        logger.exception("Error fetching warehouses: %s", e)
        return JSONResponse({"error": "Failed to fetch warehouses"}, status_code=500)
    return {"warehouses": warehouses}


@router.post("/warehouses")
async def create_warehouse(request: Request):
    try:
        body = await request.json()
    except ValueError:
        body = None

    if not isinstance(body, dict) or not body.get("name") or not body.get("state"):
        return JSONResponse({"error": "Name and state are required"}, status_code=400)

    try:
        data = WarehouseCreate.model_validate(body)
    except ValidationError as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    try:
        warehouse = await inventory_service.create_warehouse(data)
    except Exception as e:
        logger.exception("Error creating warehouse: %s", e)
        return JSONResponse({"error": "Failed to create warehouse"}, status_code=500)

    return JSONResponse({"warehouse": warehouse.model_dump()}, status_code=201)


@router.get("/stock")
async def get_stock(warehouseId: Optional[str] = None, productId: Optional[str] = None):
    if productId:
        return await inventory_service.get_product_stock(productId)
    if warehouseId:
        return {"inventory": await inventory_service.get_warehouse_stock(warehouseId)}
    return JSONResponse({"error": "warehouseId or productId parameter is required"}, status_code=400)
