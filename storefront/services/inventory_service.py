import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from storefront.database.mongo import db
from storefront.products.models import Warehouse, WarehouseCreate, WarehouseStockEntry

logger = logging.getLogger(__name__)

NO_ID = {"_id": 0}

# stored column -> API attribute
WAREHOUSE_FIELDS = {
    "address": "address",
    "contact_phone": "contactPhone",
    "contact_email": "contactEmail",
    "map_link": "mapLink",
    "capacity": "capacity",
    "notes": "notes",
}


def _timestamp(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value or "")


def warehouse_from_row(row: dict[str, Any]) -> Warehouse:
    optional = {attr: row.get(column) or None for column, attr in WAREHOUSE_FIELDS.items()}
    if optional["capacity"] is not None:
        try:
            optional["capacity"] = int(optional["capacity"])
        except (TypeError, ValueError, OverflowError):
            optional["capacity"] = None
    for attr in ("address", "contactPhone", "contactEmail", "mapLink", "notes"):
        if optional[attr] is not None:
            optional[attr] = str(optional[attr])

    return Warehouse(
        id=str(row.get("id") or ""),
        name=str(row.get("name") or ""),
        state=str(row.get("state") or ""),
        isAvailable=bool(row.get("is_available")),
        createdAt=_timestamp(row.get("created_at")),
        updatedAt=_timestamp(row.get("updated_at")),
        **optional,
    )


async def list_warehouses() -> list[Warehouse]:
    """All warehouses ordered by state then name. Store errors propagate."""
    rows = await db.warehouses.find({}, NO_ID).sort([("state", 1), ("name", 1)]).to_list(None)
    return [warehouse_from_row(row) for row in rows]


async def create_warehouse(data: WarehouseCreate) -> Warehouse:
    now = datetime.now(timezone.utc)
    row = {
        "id": str(uuid.uuid4()),
        "name": data.name,
        "state": data.state,
        "address": data.address,
        "contact_phone": data.contactPhone,
        "contact_email": data.contactEmail,
        "map_link": data.mapLink,
        "capacity": data.capacity,
        "notes": data.notes,
        "is_available": data.isAvailable,
        "created_at": now,
        "updated_at": now,
    }
    await db.warehouses.insert_one(dict(row))
    logger.info("Created warehouse %s (%s, %s)", row["id"], data.name, data.state)
    return warehouse_from_row(row)


async def get_warehouse_stock(warehouse_id: str) -> list[dict]:
    try:
        rows = await db.warehouse_products.find({"warehouse_id": warehouse_id}, NO_ID).to_list(None)
    except Exception as e:
        logger.error(f"Fetch inventory error for warehouse {warehouse_id}: {e}")
        return []
    return [_stock_row(row) for row in rows]


async def get_product_stock(product_id: str) -> dict:
    """Per-warehouse stock for one product plus the total across warehouses."""
    try:
        rows = await db.warehouse_products.find({"product_id": product_id}, NO_ID).to_list(None)
    except Exception as e:
        logger.error(f"Get product inventory error for {product_id}: {e}")
        rows = []

    stock = [_stock_row(row) for row in rows]
    return {
        "productId": product_id,
        "totalStock": sum(entry["stock_count"] for entry in stock),
        "warehouses": stock,
    }


def _stock_row(row: dict[str, Any]) -> dict:
    try:
        count = int(row.get("stock_count") or 0)
    except (TypeError, ValueError, OverflowError):
        count = 0
    return {
        "warehouse_id": str(row.get("warehouse_id") or ""),
        "product_id": str(row.get("product_id") or ""),
        "stock_count": count,
    }


async def upsert_warehouse_stock(entries: list[WarehouseStockEntry]) -> dict:
    """
    Upsert stock counts keyed on (warehouse_id, product_id).

    Store errors propagate; the route turns them into a 500.
    """
    count = 0

    for entry in entries:
        await db.warehouse_products.update_one(
            {"warehouse_id": entry.warehouse_id, "product_id": entry.product_id},
            {
                "$set": {
                    "warehouse_id": entry.warehouse_id,
                    "product_id": entry.product_id,
                    "stock_count": entry.stock_count,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
            upsert=True,
        )
        count += 1

    logger.info("Upserted %d warehouse stock rows", count)
    return {"upserted": count}
