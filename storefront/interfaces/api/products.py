"""Products API routes — public catalog reads, owner-only writes."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from storefront.application.services.catalog_query import MAX_PAGE, MAX_PAGE_SIZE
from storefront.application.services.product_service import (
    create_product,
    delete_product,
    get_product,
    get_products_by_category,
    list_products,
    search_products,
    update_product,
)
from storefront.core.exceptions import MissingCredentialsException
from storefront.domain.repositories.category_repository import CategoryRepository
from storefront.domain.repositories.product_repository import ProductRepository
from storefront.domain.schemas.auth import Identity
from storefront.domain.schemas.product import ProductCreate, ProductFilter, ProductUpdate
from storefront.interfaces.api.deps import get_current_user, get_optional_user
from storefront.interfaces.api.responses import envelope
from storefront.interfaces.deps import get_category_repository, get_product_repository

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("")
def all_products(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(12, ge=1, le=MAX_PAGE_SIZE),
    category: Optional[str] = None,
    min_price: Optional[Decimal] = Query(None, alias="minPrice"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice"),
    search: Optional[str] = None,
    sort_by: str = Query("created_at", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    in_stock: Optional[bool] = Query(None, alias="inStock"),
    mine: bool = False,
    repo: ProductRepository = Depends(get_product_repository),
    user: Optional[Identity] = Depends(get_optional_user),
):
    """List active products with filters, sorting and pagination."""
    if mine and user is None:
        raise MissingCredentialsException()

    filters = ProductFilter(
        page=page,
        limit=limit,
        category=category,
        min_price=min_price,
        max_price=max_price,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        in_stock=in_stock,
        owner_id=user.id if mine else None,
    )
    return envelope(list_products(repo, filters))


@router.get("/search")
def search(
    q: Optional[str] = None,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(12, ge=1, le=MAX_PAGE_SIZE),
    repo: ProductRepository = Depends(get_product_repository),
    user: Optional[Identity] = Depends(get_optional_user),
):
    return envelope(search_products(repo, q, page, limit))


@router.get("/category/{category}")
def by_category(
    category: str,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(12, ge=1, le=MAX_PAGE_SIZE),
    repo: ProductRepository = Depends(get_product_repository),
    user: Optional[Identity] = Depends(get_optional_user),
):
    """Active products of one category plus price/stock statistics."""
    return envelope(get_products_by_category(repo, category, page, limit))


@router.get("/{product_id}")
def read_product(
    product_id: UUID,
    repo: ProductRepository = Depends(get_product_repository),
    user: Optional[Identity] = Depends(get_optional_user),
):
    return envelope({"product": get_product(repo, str(product_id))})


@router.post("", status_code=status.HTTP_201_CREATED)
def add_product(
    body: ProductCreate,
    repo: ProductRepository = Depends(get_product_repository),
    categories: CategoryRepository = Depends(get_category_repository),
    user: Identity = Depends(get_current_user),
):
    product = create_product(repo, categories, body, user)
    return envelope({"product": product}, "Producto creado exitosamente")


@router.put("/{product_id}")
def edit_product(
    product_id: UUID,
    body: ProductUpdate,
    repo: ProductRepository = Depends(get_product_repository),
    categories: CategoryRepository = Depends(get_category_repository),
    user: Identity = Depends(get_current_user),
):
    product = update_product(repo, categories, str(product_id), body, user)
    return envelope({"product": product}, "Producto actualizado exitosamente")


@router.delete("/{product_id}")
def remove_product(
    product_id: UUID,
    repo: ProductRepository = Depends(get_product_repository),
    user: Identity = Depends(get_current_user),
):
    delete_product(repo, str(product_id), user)
    return envelope(message="Producto eliminado exitosamente")
