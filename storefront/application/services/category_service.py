"""Category service — flat lookup of category labels."""

from typing import List

import structlog

from storefront.core.exceptions import EntityNotFoundException
from storefront.domain.repositories.category_repository import CategoryRepository
from storefront.domain.schemas.category import CategoryCreate, CategoryRead

logger = structlog.get_logger(__name__)


def list_categories(repo: CategoryRepository) -> List[CategoryRead]:
    return [CategoryRead.model_validate(c) for c in repo.list_all()]


def get_category(repo: CategoryRepository, category_id: str) -> CategoryRead:
    category = repo.get_by_id(category_id)
    if category is None:
        raise EntityNotFoundException("Categoría no encontrada")
    return CategoryRead.model_validate(category)


def create_category(repo: CategoryRepository, body: CategoryCreate) -> CategoryRead:
    category = repo.create(body.description)
    logger.info("Category created", category_id=category.id, description=category.description)
    return CategoryRead.model_validate(category)
