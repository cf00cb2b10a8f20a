"""
API Dependencies — repositories bound to the request-scoped session.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from storefront.domain.repositories.category_repository import CategoryRepository
from storefront.domain.repositories.product_repository import ProductRepository
from storefront.domain.repositories.user_repository import UserRepository
from storefront.infrastructure.database import get_db
from storefront.infrastructure.repositories.category_repository import SQLAlchemyCategoryRepository
from storefront.infrastructure.repositories.product_repository import SQLAlchemyProductRepository
from storefront.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get credential store instance."""
    return SQLAlchemyUserRepository(db)


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    """Get product repository instance."""
    return SQLAlchemyProductRepository(db)


def get_category_repository(db: Session = Depends(get_db)) -> CategoryRepository:
    """Get category repository instance."""
    return SQLAlchemyCategoryRepository(db)
