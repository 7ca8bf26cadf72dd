from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field

PLACEHOLDER_IMAGE = "/placeholder-product.jpg"


class CanonicalProduct(BaseModel):
    id: str
    slug: str
    name: str
    category: str
    description: str
    features: List[str] = []

    images: List[str] = Field(default_factory=lambda: [PLACEHOLDER_IMAGE], min_length=1)
    imageUrl: str = PLACEHOLDER_IMAGE
    videos: List[str] = []

    price: float = 0
    original_price: float = 0
    discount_percent: float = 0

    inStock: bool = False
    isFeatured: bool = False
    is_promo: bool = False
    is_best_seller: bool = False
    is_featured_deal: bool = False

    modelNo: str = ""
    dimensions: str = ""
    materials: str = ""
    weight_capacity: str = ""
    warranty: str = ""
    delivery_timeframe: str = ""


class RevalidationEvent(BaseModel):
    type: Literal["INSERT", "UPDATE", "DELETE"]
    record: Optional[dict[str, Any]] = None
    old_record: Optional[dict[str, Any]] = None


class WarehouseStockEntry(BaseModel):
    warehouse_id: str
    product_id: str
    stock_count: int = 0


class WarehouseCreate(BaseModel):
    name: str
    state: str
    address: Optional[str] = None
    contactPhone: Optional[str] = None
    contactEmail: Optional[str] = None
    mapLink: Optional[str] = None
    capacity: Optional[int] = None
    notes: Optional[str] = None
    isAvailable: bool = True


class Warehouse(WarehouseCreate):
    id: str
    createdAt: str = ""
    updatedAt: str = ""


class ProductFilters(BaseModel):
    category: Optional[str] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    is_featured: Optional[bool] = None
    is_promo: Optional[bool] = None
    is_best_seller: Optional[bool] = None
    is_featured_deal: Optional[bool] = None
    search: Optional[str] = None
    page: int = 1
    limit: Optional[int] = None

    def is_empty(self) -> bool:
        return self == ProductFilters()
