"""Category API routes — list, get, create."""

from fastapi import APIRouter, Depends, status

from storefront.application.services.category_service import (
    create_category,
    get_category,
    list_categories,
)
from storefront.domain.repositories.category_repository import CategoryRepository
from storefront.domain.schemas.category import CategoryCreate
from storefront.interfaces.api.responses import envelope
from storefront.interfaces.deps import get_category_repository

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get("")
def all_categories(repo: CategoryRepository = Depends(get_category_repository)):
    categories = list_categories(repo)
    if not categories:
        return envelope([], "No hay categorías disponibles")
    return envelope(categories, "Categorías obtenidas exitosamente")


@router.get("/{category_id}")
def read_category(category_id: str, repo: CategoryRepository = Depends(get_category_repository)):
    return envelope(get_category(repo, category_id), "Categoría encontrada")


@router.post("", status_code=status.HTTP_201_CREATED)
def add_category(body: CategoryCreate, repo: CategoryRepository = Depends(get_category_repository)):
    return envelope(create_category(repo, body), "Categoría creada exitosamente")
