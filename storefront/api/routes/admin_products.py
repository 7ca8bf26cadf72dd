import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from storefront.api.deps import get_forwarder
from storefront.services import product_service
from storefront.services.revalidation_forwarder import RevalidationForwarder

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/")
async def create_product(data: dict[str, Any] = Body(...), forwarder: RevalidationForwarder = Depends(get_forwarder)):
    if not data.get("name"):
        return JSONResponse({"error": "Product name is required"}, status_code=400)
    try:
        product = await product_service.create_product(data, forwarder)
    except Exception as e:
        logger.exception("Failed to create product: %s", e)
        return JSONResponse({"error": str(e)}, status_code=500)
    return {"message": "Product created", "product": product}


@router.put("/{product_id}")
async def update_product(product_id: str, updates: dict[str, Any] = Body(...), forwarder: RevalidationForwarder = Depends(get_forwarder)):
    try:
        product = await product_service.update_product(product_id, updates, forwarder)
    except product_service.InvalidProductId as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except Exception as e:
        logger.exception("Failed to update product %s: %s", product_id, e)
        return JSONResponse({"error": str(e)}, status_code=500)

    if product is None:
        return JSONResponse({"error": "Product not found"}, status_code=404)
    return {"message": "Product updated", "product": product}


@router.delete("/{product_id}")
async def delete_product(product_id: str, forwarder: RevalidationForwarder = Depends(get_forwarder)):
    try:
        deleted = await product_service.delete_product(product_id, forwarder)
    except product_service.InvalidProductId as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except Exception as e:
        logger.exception("Failed to delete product %s: %s", product_id, e)
        return JSONResponse({"error": str(e)}, status_code=500)

    if not deleted:
        return JSONResponse({"error": "Product not found"}, status_code=404)
    return {"message": "Product deleted", "id": product_id}
