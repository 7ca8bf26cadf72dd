from fastapi import APIRouter
from pydantic import BaseModel

from storefront.services import product_service

router = APIRouter()


class CompareRequest(BaseModel):
    ids: list[str] = []


@router.get("/search")
async def search(q: str = ""):
    return await product_service.search_products(q)


@router.post("/compare")
async def compare(body: CompareRequest):
    return await product_service.get_products_by_ids(body.ids)
