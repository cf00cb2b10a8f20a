"""
Catalog query builder.

Turns a listing request (filters, sort, pagination) into a validated,
bounded query: a list of SQL conditions, a deterministic ordering and an
offset/limit window. Nothing here touches the database.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy import or_

from storefront.core.exceptions import ValidationException
from storefront.domain.models.product import Product
from storefront.domain.schemas.product import ProductFilter

MIN_SEARCH_LENGTH = 2
MAX_PAGE_SIZE = 100
MAX_PAGE = 1_000_000
DEFAULT_PAGE_SIZE = 12
SORT_ORDERS = ("asc", "desc")

# Caller-facing sort keys -> columns. Anything else sorts by newest first.
SORTABLE_FIELDS = {
    "created_at": Product.created_at,
    "createdAt": Product.created_at,
    "rating_average": Product.rating_average,
    "ratingAverage": Product.rating_average,
    "name": Product.name,
    "price": Product.price,
    "stock": Product.stock,
}
DEFAULT_SORT = (Product.created_at, "desc")


def validate_pagination(page: int, limit: int) -> None:
    if not 1 <= page <= MAX_PAGE or not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationException(
            "Parámetros de paginación inválidos",
            details={"page": page, "limit": limit, "max_page": MAX_PAGE, "max_limit": MAX_PAGE_SIZE},
        )


def normalize_search_term(term: Optional[str]) -> str:
    clean = (term or "").strip()
    if len(clean) < MIN_SEARCH_LENGTH:
        raise ValidationException(
            f"El término de búsqueda debe tener al menos {MIN_SEARCH_LENGTH} caracteres"
        )
    return clean


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_condition(term: str):
    """Case-insensitive substring match on name OR description."""
    pattern = f"%{escape_like(term)}%"
    return or_(
        Product.name.ilike(pattern, escape="\\"),
        Product.description.ilike(pattern, escape="\\"),
    )


def resolve_sort(sort_by: Optional[str], sort_order: Optional[str]) -> List[Any]:
    """Map a sort key through the allow-list. Product id breaks ties."""
    order = (sort_order or "desc").strip().lower()
    if order not in SORT_ORDERS:
        raise ValidationException("El orden debe ser 'asc' o 'desc'", details={"sortOrder": sort_order})

    column = SORTABLE_FIELDS.get((sort_by or "").strip())
    if column is None:
        column, order = DEFAULT_SORT

    primary = column.asc() if order == "asc" else column.desc()
    return [primary, Product.id.asc()]


@dataclass
class CatalogQuery:
    conditions: List[Any]
    ordering: List[Any]
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    search_term: Optional[str] = None
    statistics_conditions: List[Any] = field(default_factory=list)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_filter(cls, filters: ProductFilter) -> "CatalogQuery":
        """Generic listing: every filter is optional, active products only."""
        validate_pagination(filters.page, filters.limit)

        conditions: List[Any] = [Product.is_active.is_(True)]

        if filters.category:
            conditions.append(Product.category == filters.category)
        if filters.min_price is not None:
            conditions.append(Product.price >= Decimal(filters.min_price))
        if filters.max_price is not None:
            conditions.append(Product.price <= Decimal(filters.max_price))
        if filters.in_stock:
            conditions.append(Product.stock > 0)
        if filters.owner_id:
            conditions.append(Product.owner_id == filters.owner_id)

        search_term = None
        # None or "" means no search; anything else must be long enough
        if filters.search:
            search_term = normalize_search_term(filters.search)
            conditions.append(search_condition(search_term))

        return cls(
            conditions=conditions,
            ordering=resolve_sort(filters.sort_by, filters.sort_order),
            page=filters.page,
            limit=filters.limit,
            search_term=search_term,
        )

    @classmethod
    def for_search(cls, term: Optional[str], page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> "CatalogQuery":
        search_term = normalize_search_term(term)
        validate_pagination(page, limit)
        return cls(
            conditions=[Product.is_active.is_(True), search_condition(search_term)],
            ordering=[Product.created_at.desc(), Product.id.asc()],
            page=page,
            limit=limit,
            search_term=search_term,
        )

    @classmethod
    def for_category(cls, category: str, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> "CatalogQuery":
        validate_pagination(page, limit)
        conditions = [Product.is_active.is_(True), Product.category == category]
        return cls(
            conditions=conditions,
            ordering=[Product.rating_average.desc(), Product.created_at.desc(), Product.id.asc()],
            page=page,
            limit=limit,
            statistics_conditions=list(conditions),
        )
