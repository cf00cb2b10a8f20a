"""Product service — catalog reads and owner-only mutations."""

import structlog

from storefront.application.services.catalog_query import CatalogQuery
from storefront.core.exceptions import (
    EntityNotFoundException,
    ForbiddenException,
    GoneException,
    ValidationException,
)
from storefront.domain.models.product import Product
from storefront.domain.repositories.category_repository import CategoryRepository
from storefront.domain.repositories.product_repository import ProductRepository
from storefront.domain.schemas.auth import Identity
from storefront.domain.schemas.common import Pagination
from storefront.domain.schemas.product import (
    CategoryPage,
    CategoryStatistics,
    PriceRange,
    ProductCreate,
    ProductFilter,
    ProductPage,
    ProductRead,
    ProductUpdate,
    ProductWithCreator,
    SearchPage,
)

logger = structlog.get_logger(__name__)

PRODUCT_NOT_FOUND = "Producto no encontrado"
PRODUCT_UNAVAILABLE = "Producto no disponible"


def _ensure_category(categories: CategoryRepository, category: str) -> None:
    if not categories.exists(category):
        raise ValidationException("Categoría no válida", details={"category": category})


def _load(repo: ProductRepository, product_id: str, gone_message: str = PRODUCT_UNAVAILABLE) -> Product:
    product = repo.get_by_id(product_id)
    if product is None:
        raise EntityNotFoundException(PRODUCT_NOT_FOUND)
    if not product.is_active:
        raise GoneException(gone_message)
    return product


def _ensure_owner(product: Product, identity: Identity, message: str) -> None:
    # No admin override: only the creator may change a product
    if product.owner_id != identity.id:
        raise ForbiddenException(message)


def _page(query: CatalogQuery, products: list, total: int) -> dict:
    return {
        "products": [ProductWithCreator.model_validate(p) for p in products],
        "pagination": Pagination.build(query.page, query.limit, len(products), total),
    }


def create_product(
    repo: ProductRepository,
    categories: CategoryRepository,
    body: ProductCreate,
    identity: Identity,
) -> ProductRead:
    _ensure_category(categories, body.category)

    product = repo.create({**body.model_dump(), "owner_id": identity.id})
    logger.info("Product created", product_id=product.id, owner_id=identity.id)
    return ProductRead.model_validate(product)


def get_product(repo: ProductRepository, product_id: str) -> ProductWithCreator:
    product = repo.get_with_creator(product_id)
    if product is None:
        raise EntityNotFoundException(PRODUCT_NOT_FOUND)
    if not product.is_active:
        raise GoneException(PRODUCT_UNAVAILABLE)
    return ProductWithCreator.model_validate(product)


def update_product(
    repo: ProductRepository,
    categories: CategoryRepository,
    product_id: str,
    body: ProductUpdate,
    identity: Identity,
) -> ProductRead:
    product = _load(repo, product_id)
    _ensure_owner(product, identity, "No tienes permisos para editar este producto")

    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    if "category" in changes:
        _ensure_category(categories, changes["category"])

    product = repo.update(product, changes)
    logger.info("Product updated", product_id=product_id, fields=sorted(changes))
    return ProductRead.model_validate(product)


def delete_product(repo: ProductRepository, product_id: str, identity: Identity) -> None:
    product = _load(repo, product_id, gone_message="Producto ya eliminado")
    _ensure_owner(product, identity, "No tienes permisos para eliminar este producto")

    repo.soft_delete(product)
    logger.info("Product deleted", product_id=product_id, owner_id=identity.id)


def list_products(repo: ProductRepository, filters: ProductFilter) -> ProductPage:
    query = CatalogQuery.from_filter(filters)
    products, total = repo.find_page(query)
    return ProductPage(**_page(query, products, total))


def search_products(repo: ProductRepository, term: str, page: int = 1, limit: int = 12) -> SearchPage:
    query = CatalogQuery.for_search(term, page, limit)
    products, total = repo.find_page(query)
    return SearchPage(search_term=query.search_term, **_page(query, products, total))


def get_products_by_category(
    repo: ProductRepository,
    category: str,
    page: int = 1,
    limit: int = 12,
) -> CategoryPage:
    """A label with no active products, known or not, yields an empty page and zeroed statistics."""
    query = CatalogQuery.for_category(category, page, limit)
    products, total = repo.find_page(query)
    stats = repo.get_statistics(query.statistics_conditions)

    return CategoryPage(
        category=category,
        statistics=CategoryStatistics(
            total_products=total,
            average_price=stats["average_price"],
            price_range=PriceRange(min=stats["min_price"], max=stats["max_price"]),
            total_stock=stats["total_stock"],
        ),
        **_page(query, products, total),
    )
