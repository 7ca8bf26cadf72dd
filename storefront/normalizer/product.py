import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from storefront.products.models import PLACEHOLDER_IMAGE, CanonicalProduct

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "name", "slug", "category", "price", "description")

# stored column -> canonical attribute
BOOL_FIELDS = {
    "in_stock": "inStock",
    "is_featured": "isFeatured",
    "is_promo": "is_promo",
    "is_best_seller": "is_best_seller",
    "is_featured_deal": "is_featured_deal",
}

DETAIL_STRING_FIELDS = {
    "model_no": "modelNo",
    "dimensions": "dimensions",
    "materials": "materials",
    "weight_capacity": "weight_capacity",
    "warranty": "warranty",
    "delivery_timeframe": "delivery_timeframe",
}


@dataclass
class NormalizedRow:
    product: CanonicalProduct
    issues: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _to_number(value: Any, name: str, issues: list[str]) -> float:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except OverflowError:
        issues.append(f"{name}: number out of range for a float")
        return 0
    except (TypeError, ValueError):
        issues.append(f"{name}: not a number ({value!r})")
        return 0
    if math.isnan(number) or math.isinf(number):
        issues.append(f"{name}: not a finite number ({value!r})")
        return 0
    return number


def _to_bool(value: Any, name: str, issues: list[str]) -> bool:
    if isinstance(value, str) and value.strip().lower() in {"false", "0", "no", "off"}:
        issues.append(f"{name}: string {value!r} treated as true")
    return bool(value)


def _split_urls(raw: str) -> list[str]:
    return [url.strip() for url in raw.split(",") if url.strip()]


def resolve_images(row: Mapping[str, Any]) -> list[str]:
    """
    Resolve the ordered image list for a stored row.

    Accepts a native list, a JSON-encoded array string, or a comma-delimited
    string in ``images``; falls back to ``image_url`` and finally to the
    placeholder, so the result is never empty.
    """
    raw = row.get("images")
    images: list[str] = []

    if isinstance(raw, (list, tuple)):
        images = [str(url) for url in raw if url is not None]
    elif isinstance(raw, str) and raw:
        try:
            parsed = json.loads(raw)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            images = [str(url) for url in parsed if url is not None]
        else:
            images = _split_urls(raw)

    if not images and row.get("image_url"):
        images = [str(row["image_url"])]

    if not images:
        images = [PLACEHOLDER_IMAGE]

    return images


def parse_row(row: Mapping[str, Any]) -> NormalizedRow:
    """Normalize a stored product row and report every coercion it had to make."""
    issues: list[str] = []

    for name in REQUIRED_FIELDS:
        if row.get(name) is None:
            issues.append(f"{name}: missing")

    images = resolve_images(row)

    price = _to_number(row.get("price"), "price", issues)
    # a zero or empty original price means "not discounted"
    if row.get("original_price"):
        original_price = _to_number(row.get("original_price"), "original_price", issues)
    else:
        original_price = price
    discount_percent = _to_number(row.get("discount_percent"), "discount_percent", issues)

    features = row.get("features")
    if isinstance(features, list):
        features = [_to_str(f) for f in features]
    else:
        if features not in (None, ""):
            issues.append(f"features: expected a list, got {type(features).__name__}")
        features = []

    flags = {attr: _to_bool(row.get(column), column, issues) for column, attr in BOOL_FIELDS.items()}
    details = {attr: _to_str(row.get(column)) for column, attr in DETAIL_STRING_FIELDS.items()}

    product = CanonicalProduct(
        id=_to_str(row.get("id")),
        slug=_to_str(row.get("slug")),
        name=_to_str(row.get("name")),
        category=_to_str(row.get("category")),
        description=_to_str(row.get("description")),
        features=features,
        images=images,
        imageUrl=images[0],
        videos=[],
        price=price,
        original_price=original_price,
        discount_percent=discount_percent,
        **flags,
        **details,
    )
    return NormalizedRow(product=product, issues=issues)


def normalize_row(row: Mapping[str, Any]) -> CanonicalProduct:
    result = parse_row(row)
    if result.issues:
        logger.warning("Product %s normalized with defaults: %s", result.product.id or "?", "; ".join(result.issues))
    return result.product


def normalize_rows(rows) -> list[CanonicalProduct]:
    return [normalize_row(row) for row in rows or []]
