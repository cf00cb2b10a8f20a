"""
SQLAlchemy Implementation of Category Repository.
"""

from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.exceptions import DuplicateCategoryException
from storefront.domain.models.category import Category
from storefront.domain.repositories.category_repository import CategoryRepository


class SQLAlchemyCategoryRepository(CategoryRepository):
    """Category lookup backed by the 'category' table."""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.description.asc()).all()

    def get_by_id(self, category_id: str) -> Optional[Category]:
        return self.db.query(Category).filter(Category.id == category_id).first()

    def exists(self, description: str) -> bool:
        return (
            self.db.query(Category.description)
            .filter(Category.description == description)
            .first()
            is not None
        )

    def create(self, description: str) -> Category:
        if self.exists(description):
            raise DuplicateCategoryException()

        category = Category(description=description)
        self.db.add(category)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateCategoryException()
        self.db.refresh(category)
        return category
