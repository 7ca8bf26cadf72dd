import logging
import math
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from storefront.database.mongo import db
from storefront.normalizer.product import normalize_row, normalize_rows
from storefront.products.models import CanonicalProduct, ProductFilters
from storefront.services.revalidation_forwarder import RevalidationForwarder

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 12
SEARCH_LIMIT = 10
FEATURED_DEALS_FETCH = 7
FEATURED_DEALS_SHOWN = 6
FEATURED_LIMIT = 8
PROMO_LIMIT = 12
NO_ID = {"_id": 0}


class InvalidProductId(ValueError):
    pass


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (value or "").lower()).strip("-")
    return slug or uuid.uuid4().hex[:8]


def _text_match(term: str) -> dict:
    pattern = {"$regex": re.escape(term), "$options": "i"}
    return {"$or": [{"name": pattern}, {"category": pattern}, {"description": pattern}]}


def build_listing_query(filters: ProductFilters) -> dict:
    query: dict[str, Any] = {"in_stock": True}

    if filters.category:
        query["category"] = filters.category

    price: dict[str, float] = {}
    if filters.price_min is not None:
        price["$gte"] = filters.price_min
    if filters.price_max is not None:
        price["$lte"] = filters.price_max
    if price:
        query["price"] = price

    for flag in ("is_featured", "is_promo", "is_best_seller", "is_featured_deal"):
        value = getattr(filters, flag)
        if value is not None:
            query[flag] = value

    if filters.search and filters.search.strip():
        query.update(_text_match(filters.search.strip().lower()))

    return query


async def get_products(filters: ProductFilters | None = None, page_size: int = DEFAULT_PAGE_SIZE) -> dict:
    filters = filters or ProductFilters()
    page = max(filters.page, 1)
    limit = filters.limit or page_size
    offset = (page - 1) * limit
    query = build_listing_query(filters)

    try:
        total = await db.products.count_documents(query)
        cursor = db.products.find(query, NO_ID).sort("created_at", -1).skip(offset).limit(limit)
        rows = await cursor.to_list(None)
    except Exception as e:
        logger.error(f"Failed to fetch products (filters={filters.model_dump(exclude_none=True)}): {e}")
        return {"products": [], "totalCount": 0, "page": page, "totalPages": 0}

    return {
        "products": normalize_rows(rows),
        "totalCount": total,
        "page": page,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }


async def get_product_by_slug(slug: str) -> Optional[CanonicalProduct]:
    try:
        row = await db.products.find_one({"slug": slug}, NO_ID)
    except Exception as e:
        logger.error(f"Error fetching product {slug}: {e}")
        return None

    if not row:
        logger.info("Product not found with slug: %s", slug)
        return None
    return normalize_row(row)


async def search_products(query: str) -> list[CanonicalProduct]:
    if not query or not query.strip():
        return []

    mongo_query = {"in_stock": True, **_text_match(query.strip().lower())}
    try:
        rows = await db.products.find(mongo_query, NO_ID).limit(SEARCH_LIMIT).to_list(None)
    except Exception as e:
        logger.error(f"Search error for {query!r}: {e}")
        return []
    return normalize_rows(rows)


async def get_products_by_ids(ids: list[str]) -> list[CanonicalProduct]:
    """Bulk fetch for the compare view. Store failures yield an empty list."""
    if not ids:
        return []

    try:
        rows = await db.products.find({"id": {"$in": [str(i) for i in ids]}}, NO_ID).to_list(None)
    except Exception as e:
        logger.error(f"Error fetching compare products {ids}: {e}")
        return []
    return normalize_rows(rows)


async def get_featured_products() -> list[CanonicalProduct]:
    try:
        rows = await (
            db.products.find({"is_featured": True, "in_stock": True}, NO_ID)
            .sort("created_at", -1)
            .limit(FEATURED_LIMIT)
            .to_list(None)
        )
    except Exception as e:
        logger.error(f"Error fetching featured products: {e}")
        return []
    return normalize_rows(rows)


async def get_promo_products() -> list[CanonicalProduct]:
    try:
        rows = await (
            db.products.find({"is_promo": True, "in_stock": True}, NO_ID)
            .sort("created_at", -1)
            .limit(PROMO_LIMIT)
            .to_list(None)
        )
    except Exception as e:
        logger.error(f"Error fetching promo products: {e}")
        return []
    return normalize_rows(rows)


async def get_featured_deals() -> list[CanonicalProduct]:
    """
    In-stock products flagged as featured deals, ordered by ``deal_priority``.

    Short lists are topped up with promo products not already shown; if the
    deals query fails the promo products are served instead.
    """
    try:
        rows = await (
            db.products.find({"is_featured_deal": True, "in_stock": True}, NO_ID)
            .sort([("deal_priority", 1), ("created_at", -1)])
            .limit(FEATURED_DEALS_FETCH)
            .to_list(None)
        )
    except Exception as e:
        logger.error(f"Error fetching featured deals: {e}")
        return await get_promo_products()

    deals = normalize_rows(rows)
    if len(deals) < FEATURED_DEALS_SHOWN:
        seen = {p.id for p in deals}
        promos = [p for p in await get_promo_products() if p.id not in seen]
        deals.extend(promos[:FEATURED_DEALS_SHOWN - len(deals)])

    return deals[:FEATURED_DEALS_SHOWN]


async def get_home_sections() -> dict:
    return {
        "featured": await get_featured_products(),
        "featuredDeals": await get_featured_deals(),
    }


# ----------------------------
# Admin writes
# ----------------------------

def _validate_id(product_id: Any) -> str:
    if product_id is None or not str(product_id).strip():
        raise InvalidProductId("Invalid product ID provided.")
    return str(product_id)


async def create_product(data: dict[str, Any], forwarder: RevalidationForwarder) -> CanonicalProduct:
    row = dict(data)
    row["id"] = str(row.get("id") or uuid.uuid4())
    row["slug"] = row.get("slug") or slugify(row.get("name", ""))
    row.setdefault("created_at", datetime.now(timezone.utc))

    await db.products.insert_one(dict(row))
    row.pop("_id", None)
    logger.info("Created product %s (%s)", row["id"], row["slug"])

    await forwarder.trigger("INSERT", _event_record(row))
    return normalize_row(row)


async def update_product(product_id: Any, updates: dict[str, Any], forwarder: RevalidationForwarder) -> Optional[CanonicalProduct]:
    product_id = _validate_id(product_id)
    old_row = await db.products.find_one({"id": product_id}, NO_ID)
    if not old_row:
        return None

    updates = {k: v for k, v in updates.items() if k not in ("id", "_id", "created_at")}
    updates["updated_at"] = datetime.now(timezone.utc)
    await db.products.update_one({"id": product_id}, {"$set": updates})

    new_row = {**old_row, **updates}
    logger.info("Updated product %s", product_id)

    await forwarder.trigger("UPDATE", _event_record(new_row), _event_record(old_row))
    return normalize_row(new_row)


async def delete_product(product_id: Any, forwarder: RevalidationForwarder) -> bool:
    product_id = _validate_id(product_id)
    old_row = await db.products.find_one({"id": product_id}, NO_ID)
    if not old_row:
        return False

    # stock rows go first; a failure here must not block the product delete
    try:
        res = await db.warehouse_products.delete_many({"product_id": product_id})
        logger.info("Deleted %s inventory records for product %s", res.deleted_count, product_id)
    except Exception as e:
        logger.warning(f"Could not delete inventory records for product {product_id}: {e}")

    res = await db.products.delete_one({"id": product_id})
    if not res.deleted_count:
        return False

    logger.info("Deleted product %s", product_id)
    await forwarder.trigger("DELETE", _event_record(old_row))
    return True


def _event_record(row: dict[str, Any]) -> dict[str, Any]:
    # datetimes are not JSON serializable; the webhook only reads flat fields
    return {k: (v.isoformat() if isinstance(v, datetime) else v) for k, v in row.items() if k != "_id"}
