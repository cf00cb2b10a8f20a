"""Pydantic schemas for Product domain."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import Field, field_validator

from storefront.domain.schemas.common import Pagination, ReadModel, RequestModel

MAX_PRICE = Decimal("999999.99")
CENTS = Decimal("0.01")


def _round_price(value):
    if value is None:
        return value
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def _normalize_tags(tags):
    if tags is None:
        return tags
    normalized = []
    for tag in tags:
        clean = str(tag).strip().lower()
        if clean and clean not in normalized:
            normalized.append(clean)
    return normalized


class ProductCreate(RequestModel):
    name: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=10)
    price: Decimal = Field(ge=0, le=MAX_PRICE)
    category: str = Field(min_length=1, max_length=100)
    stock: int = Field(0, ge=0)
    images: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    @field_validator("name", "description", "category", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("price", mode="after")
    @classmethod
    def round_price(cls, value):
        return _round_price(value)

    @field_validator("tags", mode="after")
    @classmethod
    def normalize_tags(cls, value):
        return _normalize_tags(value)


class ProductUpdate(RequestModel):
    """Partial update. Owner and active flag are not part of the payload."""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, min_length=10)
    price: Optional[Decimal] = Field(None, ge=0, le=MAX_PRICE)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    stock: Optional[int] = Field(None, ge=0)
    images: Optional[list[str]] = None
    tags: Optional[list[str]] = None

    @field_validator("name", "description", "category", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("price", mode="after")
    @classmethod
    def round_price(cls, value):
        return _round_price(value)

    @field_validator("tags", mode="after")
    @classmethod
    def normalize_tags(cls, value):
        return _normalize_tags(value)


class Rating(ReadModel):
    average: float = 0
    count: int = 0


class CreatorRead(ReadModel):
    name: str
    email: str


class ProductRead(ReadModel):
    id: str
    name: str
    description: str
    price: float
    category: str
    stock: int
    images: list[str] = []
    tags: list[str] = []
    is_active: bool
    rating: Rating
    in_stock: bool
    owner_id: str = Field(serialization_alias="createdBy")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductWithCreator(ProductRead):
    creator: Optional[CreatorRead] = None


class ProductFilter(RequestModel):
    page: int = 1
    limit: int = 12
    category: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    search: Optional[str] = None
    sort_by: str = "created_at"
    sort_order: str = "desc"
    in_stock: Optional[bool] = None
    owner_id: Optional[str] = None


class ProductPage(ReadModel):
    products: list[ProductWithCreator]
    pagination: Pagination


class SearchPage(ProductPage):
    search_term: str


class PriceRange(ReadModel):
    min: float = 0
    max: float = 0


class CategoryStatistics(ReadModel):
    total_products: int = 0
    average_price: float = 0
    price_range: PriceRange = PriceRange()
    total_stock: int = 0


class CategoryPage(ProductPage):
    category: str
    statistics: CategoryStatistics
